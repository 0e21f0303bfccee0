from typing import Any, Dict

from src.domain.Models.plate_record import EDITABLE_FIELDS, DetectionType, PlateStatus


def clean_update_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    """
    Valida un update parcial: sólo campos editables, enums convertidos.
    id y detected_at nunca se tocan desde fuera del almacén.
    """
    unknown = set(fields) - set(EDITABLE_FIELDS)
    if unknown:
        raise ValueError(f"Campos no editables: {sorted(unknown)}")

    cleaned = dict(fields)
    if "status" in cleaned:
        cleaned["status"] = PlateStatus(cleaned["status"])
    if "detection_type" in cleaned:
        cleaned["detection_type"] = DetectionType(cleaned["detection_type"])
    return cleaned
