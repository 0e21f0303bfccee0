# src/application/service_factory.py
import logging
from dataclasses import dataclass
from typing import List

from src.application.plate_ingress_service import PlateIngressService
from src.application.recognition_pipeline import RecognitionPipeline
from src.core.config import settings
from src.domain.Interfaces.event_publisher import IEventPublisher
from src.domain.Interfaces.plate_repository import IPlateRepository
from src.infrastructure.Detector.factory import create_region_detector
from src.infrastructure.Imaging.opencv_image_preprocessor import OpenCVImagePreprocessor
from src.infrastructure.Messaging.websocket_broadcaster import EventBroadcaster
from src.infrastructure.OCR.factory import create_plate_recognizer
from src.infrastructure.Registry.simulated_registry_validator import SimulatedRegistryValidator
from src.infrastructure.Storage.demo_seed import seed_demo_plates

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    repository: IPlateRepository
    broadcaster: EventBroadcaster
    ingress: PlateIngressService
    event_sinks: List[IEventPublisher]

    def close(self) -> None:
        for sink in self.event_sinks:
            close = getattr(sink, "close", None)
            if close is None:
                continue
            try:
                close()
            except Exception:
                logger.exception("Error al cerrar sink %s", type(sink).__name__)


def create_repository() -> IPlateRepository:
    backend = settings.store_backend.lower()
    if backend == "sql":
        from src.infrastructure.Database.session import build_engine, build_session_factory
        from src.infrastructure.Storage.sql_plate_repository import SqlPlateRepository
        return SqlPlateRepository(build_session_factory(build_engine(settings.db_url)))
    if backend == "memory":
        from src.infrastructure.Storage.in_memory_plate_repository import InMemoryPlateRepository
        return InMemoryPlateRepository()
    raise ValueError(f"STORE_BACKEND desconocido: {settings.store_backend}")


def create_event_sinks() -> List[IEventPublisher]:
    if not settings.kafka_enabled:
        return []
    from src.infrastructure.Messaging.kafka_publisher import KafkaEventPublisher
    from src.infrastructure.Messaging.retry_publisher import RetryPublisher

    kafka_raw = KafkaEventPublisher()
    return [RetryPublisher(kafka_raw, attempts=settings.kafka_retry_attempts, base_delay=0.5)]


def build_services(repository: IPlateRepository | None = None,
                   event_sinks: List[IEventPublisher] | None = None) -> ServiceContainer:
    repository = repository if repository is not None else create_repository()
    if settings.seed_demo_data:
        seed_demo_plates(repository)

    validator = SimulatedRegistryValidator()
    pipeline = RecognitionPipeline(
        preprocessor=OpenCVImagePreprocessor(),
        region_detector=create_region_detector(),
        recognizer=create_plate_recognizer(),
        validator=validator,
        confidence_threshold=settings.confidence_threshold,
    )
    broadcaster = EventBroadcaster()
    sinks = event_sinks if event_sinks is not None else create_event_sinks()

    ingress = PlateIngressService(
        pipeline=pipeline,
        validator=validator,
        repository=repository,
        broadcaster=broadcaster,
        event_sinks=sinks,
    )
    logger.info("Servicios construidos: store=%s recognizer=%s localizer=%s sinks=%d",
                type(repository).__name__, settings.recognizer_backend,
                settings.localizer_backend, len(sinks))
    return ServiceContainer(repository=repository, broadcaster=broadcaster, ingress=ingress, event_sinks=sinks)
