# src/domain/exceptions.py


class AlprError(Exception):
    """Error base del servicio ALPR."""


class DecodeError(AlprError):
    """La entrada no se pudo decodificar como imagen."""


class PersistenceError(AlprError):
    """
    Fallo del almacén de placas.
    Se propaga siempre al llamador: perder una detección en silencio
    rompe el registro de auditoría.
    """


class SubscriberDeliveryError(AlprError):
    """Fallo al entregar un evento a un suscriptor concreto."""

    def __init__(self, subscriber_id: str, cause: Exception):
        super().__init__(f"Entrega fallida a suscriptor {subscriber_id}: {cause}")
        self.subscriber_id = subscriber_id
        self.cause = cause
