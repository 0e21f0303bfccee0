from typing import Protocol


class ISubscriberConnection(Protocol):
    """
    Conexión viva de un suscriptor (p.ej. un WebSocket).
    """

    @property
    def is_open(self) -> bool:
        ...

    async def send_text(self, message: str) -> None:
        ...
