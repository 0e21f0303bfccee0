from abc import ABC, abstractmethod
from typing import Optional

from src.domain.Models.detection_result import DetectionResult


class IPlateRecognizer(ABC):
    """
    Capacidad de reconocimiento de texto sobre la región de la placa.

    Contrato para cualquier implementación:
    - confidence en [0, 1]
    - plate_text respeta el alfabeto esperado de la jurisdicción
    - sin placa -> None, nunca una suposición de baja confianza
    """
    @abstractmethod
    def recognize(self, region: bytes) -> Optional[DetectionResult]:
        pass
