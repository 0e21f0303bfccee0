# src/infrastructure/Database/entities/plate_entity.py
from sqlalchemy import Column, DateTime, Enum, Integer, String, Text

from src.domain.Models.plate_record import DetectionType, PlateStatus
from src.infrastructure.Database.base import Base


class PlateEntity(Base):
    __tablename__ = "license_plates"

    id = Column(Integer, primary_key=True, autoincrement=True)
    plate_number = Column(String(32), nullable=False, index=True)
    region = Column(String(100), nullable=False)
    status = Column(Enum(PlateStatus, values_callable=lambda e: [m.value for m in e]), nullable=False)
    detection_type = Column(Enum(DetectionType, values_callable=lambda e: [m.value for m in e]), nullable=False)
    details = Column(Text, nullable=False, default="")
    detected_at = Column(DateTime(timezone=True), nullable=False, index=True)

    def __repr__(self):
        return (
            f"<PlateEntity(id={self.id}, plate_number='{self.plate_number}', "
            f"status='{self.status}', detected_at={self.detected_at})>"
        )
