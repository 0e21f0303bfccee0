# src/infrastructure/Messaging/websocket_broadcaster.py
# Difusión en tiempo real de eventos de placas a los visores conectados

import asyncio
import json
import logging
import uuid
from dataclasses import dataclass, field
from typing import Dict, List

from starlette.websockets import WebSocket, WebSocketState

from src.domain.Interfaces.subscriber_connection import ISubscriberConnection
from src.domain.Models.broadcast_event import BroadcastEvent
from src.domain.exceptions import SubscriberDeliveryError
from src.monitoring import metrics

logger = logging.getLogger(__name__)


class WebSocketSubscriber:
    """Adaptador de un WebSocket de Starlette/FastAPI a ISubscriberConnection."""

    def __init__(self, websocket: WebSocket):
        self.websocket = websocket

    @property
    def is_open(self) -> bool:
        return (
            self.websocket.client_state == WebSocketState.CONNECTED
            and self.websocket.application_state == WebSocketState.CONNECTED
        )

    async def send_text(self, message: str) -> None:
        await self.websocket.send_text(message)


@dataclass(frozen=True)
class SubscriptionHandle:
    subscriber_id: str = field(default_factory=lambda: uuid.uuid4().hex)


class EventBroadcaster:
    """
    Registro de suscriptores + fan-out de eventos.

    - publish toma una copia del conjunto bajo lock y envía fuera de él:
      suscribirse/desuscribirse en medio de un publish nunca rompe el bucle
    - publish concurrentes se serializan entre sí (cada uno ve un snapshot coherente)
    - conexiones cerradas se saltan y se podan; un envío fallido se registra
      y no bloquea a los demás
    - sin buffer, sin reintentos, sin histórico para nuevos suscriptores
    """

    def __init__(self):
        self._subscribers: Dict[SubscriptionHandle, ISubscriberConnection] = {}
        self._lock = asyncio.Lock()
        self._publish_lock = asyncio.Lock()

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    async def subscribe(self, connection: ISubscriberConnection) -> SubscriptionHandle:
        handle = SubscriptionHandle()
        async with self._lock:
            self._subscribers[handle] = connection
            count = len(self._subscribers)
        metrics.live_subscribers.set(count)
        logger.info("Suscriptor %s conectado (total=%d)", handle.subscriber_id, count)
        return handle

    async def unsubscribe(self, handle: SubscriptionHandle) -> None:
        async with self._lock:
            removed = self._subscribers.pop(handle, None)
            count = len(self._subscribers)
        if removed is not None:
            metrics.live_subscribers.set(count)
            logger.info("Suscriptor %s desconectado (total=%d)", handle.subscriber_id, count)

    async def publish(self, event: BroadcastEvent) -> int:
        """Envía el evento a todos los suscriptores abiertos. Devuelve cuántos lo recibieron."""
        message = event.to_json()

        async with self._publish_lock:
            async with self._lock:
                snapshot = list(self._subscribers.items())

            if not snapshot:
                return 0

            delivered = 0
            dead: List[SubscriptionHandle] = []
            for handle, connection in snapshot:
                if not connection.is_open:
                    dead.append(handle)
                    continue
                try:
                    await self._deliver(handle, connection, message)
                    delivered += 1
                except SubscriberDeliveryError as ex:
                    logger.warning("%s", ex)
                    metrics.delivery_failures_total.inc()
                    dead.append(handle)

        for handle in dead:
            await self.unsubscribe(handle)

        logger.debug("Evento %s id=%s entregado a %d/%d suscriptores",
                     event.type.value, event.data.id, delivered, len(snapshot))
        return delivered

    async def handle_message(self, handle: SubscriptionHandle, data: str) -> None:
        """
        Mensajes del cliente. Formato:
            {"action": "ping"}
        """
        try:
            msg = json.loads(data)
        except json.JSONDecodeError:
            logger.debug("Mensaje no JSON de %s ignorado", handle.subscriber_id)
            return

        if isinstance(msg, dict) and msg.get("action") == "ping":
            connection = self._subscribers.get(handle)
            if connection is None or not connection.is_open:
                return
            try:
                await self._deliver(handle, connection, json.dumps({"type": "PONG"}))
            except SubscriberDeliveryError as ex:
                logger.warning("%s", ex)
                await self.unsubscribe(handle)

    @staticmethod
    async def _deliver(handle: SubscriptionHandle, connection: ISubscriberConnection, message: str) -> None:
        try:
            await connection.send_text(message)
        except Exception as ex:
            raise SubscriberDeliveryError(handle.subscriber_id, ex) from ex

    def get_stats(self) -> dict:
        return {"total_connections": self.subscriber_count}
