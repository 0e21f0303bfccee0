# src/domain/Models/detection_result.py
from dataclasses import dataclass, asdict
from typing import Optional


@dataclass(frozen=True)
class BoundingBox:
    """Caja (x, y, width, height) en coordenadas de la imagen."""
    x: int
    y: int
    width: int
    height: int


@dataclass
class DetectionResult:
    """
    Candidato de placa producido por un reconocedor.
    Transitorio: sólo vive dentro de una ejecución del pipeline.
    """
    plate_text: str
    confidence: float                       # nivel de confianza en [0, 1]
    bounding_box: Optional[BoundingBox] = None

    def __post_init__(self):
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"confidence fuera de rango [0,1]: {self.confidence}")

    def to_dict(self) -> dict:
        return {
            "plateText": self.plate_text,
            "confidence": self.confidence,
            "boundingBox": asdict(self.bounding_box) if self.bounding_box else None,
        }
