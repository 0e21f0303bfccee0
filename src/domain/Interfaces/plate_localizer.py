from abc import ABC, abstractmethod
from typing import Optional

import numpy as np

from src.domain.Models.detection_result import BoundingBox


class IPlateLocalizer(ABC):
    """
    Localizador de objetos: encuentra la caja que probablemente contiene la placa.
    """
    @abstractmethod
    def locate(self, image: np.ndarray) -> Optional[BoundingBox]:
        """Devuelve la mejor caja candidata o None si no hay placa."""
        pass
