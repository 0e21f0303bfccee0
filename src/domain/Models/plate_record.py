# src/domain/Models/plate_record.py
from dataclasses import dataclass, asdict
from datetime import datetime
from enum import Enum


class PlateStatus(str, Enum):
    VALID = "valid"
    EXPIRED = "expired"
    SUSPENDED = "suspended"
    OTHER = "other"


class DetectionType(str, Enum):
    AUTOMATIC = "automatic"
    MANUAL = "manual"


# Campos que el llamador puede fijar (create) o corregir (update).
EDITABLE_FIELDS = ("plate_number", "region", "status", "detection_type", "details")


@dataclass(frozen=True)
class PlateRecordInput:
    """
    Datos que aporta el llamador al persistir una detección.
    id y detected_at los asigna siempre el almacén.
    """
    plate_number: str
    region: str
    status: PlateStatus
    detection_type: DetectionType
    details: str = ""


@dataclass(frozen=True)
class PlateRecord:
    """
    Registro persistido de una detección/validación.
    Inmutable: sólo IPlateRepository.update produce una copia corregida.
    """
    id: int
    plate_number: str
    region: str
    status: PlateStatus
    detection_type: DetectionType
    details: str
    detected_at: datetime

    @staticmethod
    def from_input(record_id: int, data: PlateRecordInput, detected_at: datetime) -> "PlateRecord":
        return PlateRecord(id=record_id, detected_at=detected_at, **asdict(data))

    def to_dict(self) -> dict:
        """Forma serializable (claves camelCase del contrato con los clientes)."""
        return {
            "id": self.id,
            "plateNumber": self.plate_number,
            "region": self.region,
            "status": self.status.value,
            "detectionType": self.detection_type.value,
            "details": self.details,
            "detectedAt": self.detected_at.isoformat(),
        }
