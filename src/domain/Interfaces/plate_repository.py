from abc import ABC, abstractmethod
from typing import List, Optional

from src.domain.Models.plate_record import PlateRecord, PlateRecordInput


class IPlateRepository(ABC):
    """
    Almacén append-only de detecciones.

    Las implementaciones deben asignar id de forma atómica (sin duplicados
    con creates concurrentes) y las lecturas nunca ven un registro a medias.
    Los fallos del almacén se señalan con PersistenceError.
    """

    @abstractmethod
    def create(self, data: PlateRecordInput) -> PlateRecord:
        """Persiste y asigna id + detected_at."""
        pass

    @abstractmethod
    def get_by_id(self, record_id: int) -> Optional[PlateRecord]:
        pass

    @abstractmethod
    def get_by_number(self, plate_number: str) -> Optional[PlateRecord]:
        """Coincidencia más reciente si hay duplicados."""
        pass

    @abstractmethod
    def get_recent(self, limit: int) -> List[PlateRecord]:
        """Más recientes primero, nunca más de `limit`."""
        pass

    @abstractmethod
    def get_all(self) -> List[PlateRecord]:
        pass

    @abstractmethod
    def update(self, record_id: int, **fields) -> Optional[PlateRecord]:
        """Actualización parcial; None si el id no existe."""
        pass
