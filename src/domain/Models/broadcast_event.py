import json
from dataclasses import dataclass
from enum import Enum

from src.domain.Models.plate_record import PlateRecord


class EventType(str, Enum):
    PLATE_DETECTED = "PLATE_DETECTED"
    PLATE_VALIDATED = "PLATE_VALIDATED"


@dataclass(frozen=True)
class BroadcastEvent:
    """
    Evento en vuelo hacia los suscriptores. No se persiste.
    """
    type: EventType
    data: PlateRecord

    def to_dict(self) -> dict:
        return {"type": self.type.value, "data": self.data.to_dict()}

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)
