import logging

from src.domain.Interfaces.plate_repository import IPlateRepository
from src.domain.Models.plate_record import DetectionType, PlateRecordInput, PlateStatus

logger = logging.getLogger(__name__)

DEMO_PLATES = [
    PlateRecordInput("ABC-123", "Québec", PlateStatus.VALID, DetectionType.AUTOMATIC, "Plaque en règle"),
    PlateRecordInput("XYZ-789", "Ontario", PlateStatus.EXPIRED, DetectionType.MANUAL, "La plaque a expiré"),
    PlateRecordInput("DEF-456", "New York", PlateStatus.SUSPENDED, DetectionType.AUTOMATIC, "La plaque est suspendue"),
    PlateRecordInput("GHI-789", "Colombie-Britannique", PlateStatus.OTHER, DetectionType.MANUAL, "Information non disponible"),
]


def seed_demo_plates(repo: IPlateRepository) -> int:
    """Carga placas de demostración si el almacén está vacío. Devuelve cuántas creó."""
    if repo.get_all():
        return 0
    for plate in DEMO_PLATES:
        repo.create(plate)
    logger.info("🌱 %d placas de demostración cargadas", len(DEMO_PLATES))
    return len(DEMO_PLATES)
