from abc import ABC, abstractmethod
from typing import Optional


class IRegionDetector(ABC):
    """
    Extrae la región de interés (ROI) que debería contener la placa.
    """
    @abstractmethod
    def detect_region(self, encoded_image: bytes) -> Optional[bytes]:
        """
        Devuelve la región codificada o None si no se encontró.
        Nunca lanza: no encontrar región es un resultado esperado.
        """
        pass
