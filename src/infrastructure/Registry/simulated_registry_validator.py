from src.domain.Interfaces.registry_validator import IRegistryValidator
from src.domain.Models.plate_record import PlateStatus
from src.domain.Models.validation_result import ValidationResult

SHORT_FORMAT_REGION = "Québec"
LONG_FORMAT_REGION = "Ontario"
SHORT_FORMAT_MAX_LENGTH = 6

DETAILS = {
    PlateStatus.VALID: "Plaque en règle",
    PlateStatus.EXPIRED: "La plaque a expiré",
    PlateStatus.SUSPENDED: "La plaque est suspendue",
    PlateStatus.OTHER: "Information non disponible",
}


def status_for_last_char(last_char: str) -> PlateStatus:
    """
    Tabla de referencia por último dígito:
    7-9 valid, 4-6 expired, 2-3 suspended, 0-1 o no dígito other.
    """
    if not last_char.isdigit() or not last_char.isascii():
        return PlateStatus.OTHER
    digit = int(last_char)
    if digit >= 7:
        return PlateStatus.VALID
    if digit >= 4:
        return PlateStatus.EXPIRED
    if digit >= 2:
        return PlateStatus.SUSPENDED
    return PlateStatus.OTHER


class SimulatedRegistryValidator(IRegistryValidator):
    """
    Registro simulado. Mantener la tabla tal cual: los clientes dependen de
    ella para pruebas de compatibilidad hasta conectar el registro real.
    """

    def validate(self, plate_text: str) -> ValidationResult:
        plate_text = plate_text or ""
        region = SHORT_FORMAT_REGION if len(plate_text) <= SHORT_FORMAT_MAX_LENGTH else LONG_FORMAT_REGION
        status = status_for_last_char(plate_text[-1:])
        return ValidationResult(
            is_valid=True,
            status=status,
            region=region,
            details=DETAILS[status],
        )
