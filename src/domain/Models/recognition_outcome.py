from dataclasses import dataclass
from typing import Optional

from src.domain.Models.plate_record import PlateStatus


@dataclass(frozen=True)
class RecognitionOutcome:
    """
    Resultado único de una ejecución del pipeline de reconocimiento.
    """
    detected: bool
    plate_number: Optional[str] = None
    region: Optional[str] = None
    status: Optional[PlateStatus] = None
    details: Optional[str] = None
    confidence: Optional[float] = None

    @staticmethod
    def not_detected() -> "RecognitionOutcome":
        return RecognitionOutcome(detected=False)

    def to_dict(self) -> dict:
        if not self.detected:
            return {"detected": False}
        return {
            "detected": True,
            "plateNumber": self.plate_number,
            "region": self.region,
            "status": self.status.value if self.status else None,
            "details": self.details,
            "confidence": self.confidence,
        }
