from abc import ABC, abstractmethod
from src.domain.Models.broadcast_event import BroadcastEvent

class IEventPublisher(ABC):
    """
    Publicador de eventos a sistemas externos (ej. Kafka).
    """
    @abstractmethod
    def publish(self, event: BroadcastEvent) -> None:
        """Publica un BroadcastEvent en un broker de mensajes."""
        pass
