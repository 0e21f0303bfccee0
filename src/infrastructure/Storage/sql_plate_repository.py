# src/infrastructure/Storage/sql_plate_repository.py
import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from src.domain.Interfaces.plate_repository import IPlateRepository
from src.domain.Models.plate_record import PlateRecord, PlateRecordInput
from src.domain.exceptions import PersistenceError
from src.infrastructure.Database.entities.plate_entity import PlateEntity
from src.infrastructure.Storage.record_fields import clean_update_fields

logger = logging.getLogger(__name__)


def _to_record(entity: PlateEntity) -> PlateRecord:
    detected_at = entity.detected_at
    if detected_at.tzinfo is None:
        # SQLite no guarda la zona: se almacena siempre en UTC
        detected_at = detected_at.replace(tzinfo=timezone.utc)
    return PlateRecord(
        id=entity.id,
        plate_number=entity.plate_number,
        region=entity.region,
        status=entity.status,
        detection_type=entity.detection_type,
        details=entity.details,
        detected_at=detected_at,
    )


class SqlPlateRepository(IPlateRepository):
    """
    Almacén persistente usando SQLAlchemy.
    Una sesión por operación; el id lo asigna el autoincrement de la BD.
    """

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def create(self, data: PlateRecordInput) -> PlateRecord:
        entity = PlateEntity(
            plate_number=data.plate_number,
            region=data.region,
            status=data.status,
            detection_type=data.detection_type,
            details=data.details,
            detected_at=datetime.now(timezone.utc),
        )
        with self._session("create") as db:
            db.add(entity)
            db.commit()
            db.refresh(entity)
            return _to_record(entity)

    def get_by_id(self, record_id: int) -> Optional[PlateRecord]:
        with self._session("get_by_id") as db:
            entity = db.get(PlateEntity, record_id)
            return _to_record(entity) if entity else None

    def get_by_number(self, plate_number: str) -> Optional[PlateRecord]:
        with self._session("get_by_number") as db:
            entity = (
                db.query(PlateEntity)
                .filter(PlateEntity.plate_number == plate_number)
                .order_by(PlateEntity.detected_at.desc(), PlateEntity.id.desc())
                .first()
            )
            return _to_record(entity) if entity else None

    def get_recent(self, limit: int) -> List[PlateRecord]:
        if limit <= 0:
            return []
        with self._session("get_recent") as db:
            entities = (
                db.query(PlateEntity)
                .order_by(PlateEntity.detected_at.desc(), PlateEntity.id.desc())
                .limit(limit)
                .all()
            )
            return [_to_record(e) for e in entities]

    def get_all(self) -> List[PlateRecord]:
        with self._session("get_all") as db:
            return [_to_record(e) for e in db.query(PlateEntity).all()]

    def update(self, record_id: int, **fields) -> Optional[PlateRecord]:
        cleaned = clean_update_fields(fields)
        with self._session("update") as db:
            entity = db.get(PlateEntity, record_id)
            if entity is None:
                return None
            for name, value in cleaned.items():
                setattr(entity, name, value)
            db.commit()
            db.refresh(entity)
            return _to_record(entity)

    def _session(self, operation: str) -> "_RepositorySession":
        return _RepositorySession(self.session_factory(), operation)


class _RepositorySession:
    """Context manager que cierra la sesión y traduce errores a PersistenceError."""

    def __init__(self, db: Session, operation: str):
        self.db = db
        self.operation = operation

    def __enter__(self) -> Session:
        return self.db

    def __exit__(self, exc_type, exc, tb):
        try:
            if exc is not None:
                self.db.rollback()
        finally:
            self.db.close()
        if isinstance(exc, SQLAlchemyError):
            logger.error("Error de BD en %s: %s", self.operation, exc)
            raise PersistenceError(f"Fallo de persistencia en {self.operation}") from exc
        return False
