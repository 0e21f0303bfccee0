from abc import ABC, abstractmethod

from src.domain.Models.validation_result import ValidationResult


class IRegistryValidator(ABC):
    """
    Consulta al registro de matrículas.
    Es total: una placa desconocida resuelve a status=other con explicación.
    """
    @abstractmethod
    def validate(self, plate_text: str) -> ValidationResult:
        pass
