# src/infrastructure/Storage/in_memory_plate_repository.py
import logging
import threading
from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from src.domain.Interfaces.plate_repository import IPlateRepository
from src.domain.Models.plate_record import PlateRecord, PlateRecordInput
from src.infrastructure.Storage.record_fields import clean_update_fields

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryPlateRepository(IPlateRepository):
    """
    Almacén en memoria.

    Concurrencia: un único lock serializa la asignación de id y las
    escrituras. Los registros son inmutables, así que las lecturas
    copian la vista bajo el lock y nunca ven un registro a medias.
    """

    def __init__(self, clock: Callable[[], datetime] = _utcnow):
        self._records: Dict[int, PlateRecord] = {}
        self._next_id = 1
        self._lock = threading.Lock()
        self._clock = clock

    def create(self, data: PlateRecordInput) -> PlateRecord:
        with self._lock:
            record = PlateRecord.from_input(self._next_id, data, self._clock())
            self._records[record.id] = record
            self._next_id += 1
        logger.debug("Registro creado id=%d plate=%s", record.id, record.plate_number)
        return record

    def get_by_id(self, record_id: int) -> Optional[PlateRecord]:
        with self._lock:
            return self._records.get(record_id)

    def get_by_number(self, plate_number: str) -> Optional[PlateRecord]:
        matches = [r for r in self._snapshot() if r.plate_number == plate_number]
        return max(matches, key=_recency, default=None)

    def get_recent(self, limit: int) -> List[PlateRecord]:
        if limit <= 0:
            return []
        return sorted(self._snapshot(), key=_recency, reverse=True)[:limit]

    def get_all(self) -> List[PlateRecord]:
        return self._snapshot()

    def update(self, record_id: int, **fields) -> Optional[PlateRecord]:
        cleaned = clean_update_fields(fields)
        with self._lock:
            current = self._records.get(record_id)
            if current is None:
                return None
            updated = replace(current, **cleaned)
            self._records[record_id] = updated
        return updated

    def _snapshot(self) -> List[PlateRecord]:
        with self._lock:
            return list(self._records.values())


def _recency(record: PlateRecord):
    # id desempata registros creados en el mismo instante
    return record.detected_at, record.id
