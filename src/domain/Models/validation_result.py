from dataclasses import dataclass

from src.domain.Models.plate_record import PlateStatus


@dataclass(frozen=True)
class ValidationResult:
    """
    Respuesta del registro de matrículas para un texto de placa.
    """
    is_valid: bool
    status: PlateStatus
    region: str
    details: str
