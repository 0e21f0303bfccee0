import time
import logging
from typing import Callable
from src.domain.Interfaces.event_publisher import IEventPublisher
from src.domain.Models.broadcast_event import BroadcastEvent

logger = logging.getLogger(__name__)

class RetryPublisher(IEventPublisher):
    """
    Wrapper que reintenta publish hasta N veces con backoff exponencial.
    Solo reintenta si el error parece transitorio (red, timeout, broker unavailable).
    """
    _TRANSIENT_KEYWORDS = (
        "timeout",
        "connection",
        "broker",
        "unreachable",
        "not leader",
        "network",
        "transport",
    )

    def __init__(self, inner: IEventPublisher, attempts: int = 3, base_delay: float = 0.5,
                 sleep: Callable[[float], None] = time.sleep):
        self.inner = inner
        self.attempts = max(1, attempts)
        self.base_delay = base_delay
        self._sleep = sleep

    def _is_transient_error(self, exc: Exception) -> bool:
        if isinstance(exc, (TimeoutError, ConnectionError)):
            return True
        msg = str(exc).lower()
        return any(k in msg for k in self._TRANSIENT_KEYWORDS)

    def publish(self, event: BroadcastEvent) -> None:
        last_exc = None
        for i in range(1, self.attempts + 1):
            try:
                self.inner.publish(event)
                logger.debug("Publish OK (attempt %d/%d)", i, self.attempts)
                return
            except Exception as e:
                last_exc = e
                if not self._is_transient_error(e):
                    # error permanente → no reintentar
                    logger.error("Non-retryable publish error: %s", e)
                    raise
                if i == self.attempts:
                    break
                wait = self.base_delay * (2 ** (i - 1))
                logger.warning("Publish attempt %d failed (transient), retrying in %.2fs: %s", i, wait, e)
                self._sleep(wait)

        logger.error("❌ All publish attempts failed after %d retries: %s", self.attempts, last_exc)
        raise last_exc

    def close(self, timeout: float = 5.0) -> None:
        """Cierra el publisher envuelto (p. ej. flush del productor Kafka)."""
        close = getattr(self.inner, "close", None)
        if close is not None:
            close(timeout)
