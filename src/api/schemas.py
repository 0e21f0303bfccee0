# src/api/schemas.py
# Schemas Pydantic de la API

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from src.domain.Models.plate_record import DetectionType, PlateStatus


class ScanRequest(BaseModel):
    image: str = ""  # data URL o base64


class ValidateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    plate_number: str = Field(..., alias="plateNumber", min_length=1, max_length=32)
    detection_type: DetectionType = Field(DetectionType.MANUAL, alias="detectionType")


class PlateUpdateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    plate_number: Optional[str] = Field(None, alias="plateNumber", min_length=1, max_length=32)
    region: Optional[str] = None
    status: Optional[PlateStatus] = None
    detection_type: Optional[DetectionType] = Field(None, alias="detectionType")
    details: Optional[str] = None

    def to_fields(self) -> dict:
        return self.model_dump(exclude_none=True)


class HealthResponse(BaseModel):
    status: str = "ok"
    env: str
    subscribers: int = 0
