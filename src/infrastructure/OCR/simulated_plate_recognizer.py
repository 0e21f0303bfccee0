import random
import string
from typing import Optional

from src.domain.Interfaces.plate_recognizer import IPlateRecognizer
from src.domain.Models.detection_result import DetectionResult

MIN_CONFIDENCE = 0.60
MAX_CONFIDENCE = 0.95


class SimulatedPlateRecognizer(IPlateRecognizer):
    """
    Implementación de reemplazo que inventa una placa plausible (AAA-999).
    Sólo sirve para ejercitar el pipeline: en producción se usa un modelo real.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def recognize(self, region: bytes) -> Optional[DetectionResult]:
        if not region:
            return None
        letters = "".join(self.rng.choice(string.ascii_uppercase) for _ in range(3))
        digits = "".join(self.rng.choice(string.digits) for _ in range(3))
        confidence = self.rng.uniform(MIN_CONFIDENCE, MAX_CONFIDENCE)
        return DetectionResult(plate_text=f"{letters}-{digits}", confidence=confidence)
