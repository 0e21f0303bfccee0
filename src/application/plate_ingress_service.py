# src/application/plate_ingress_service.py
import asyncio
import logging
from typing import Iterable, Optional, Tuple

from src.application.recognition_pipeline import RecognitionPipeline
from src.domain.Interfaces.event_publisher import IEventPublisher
from src.domain.Interfaces.plate_repository import IPlateRepository
from src.domain.Interfaces.registry_validator import IRegistryValidator
from src.domain.Models.broadcast_event import BroadcastEvent, EventType
from src.domain.Models.plate_record import DetectionType, PlateRecord, PlateRecordInput
from src.domain.Models.recognition_outcome import RecognitionOutcome
from src.infrastructure.Messaging.websocket_broadcaster import EventBroadcaster
from src.monitoring import metrics

logger = logging.getLogger(__name__)


class PlateIngressService:
    """
    Entrada del sistema: imagen o placa tecleada -> registro persistido -> evento.

    - El pipeline corre en un hilo de trabajo (OpenCV/OCR son bloqueantes)
    - PersistenceError se propaga siempre al llamador
    - La difusión es best-effort: nunca hace fallar la petición
    """

    def __init__(
        self,
        pipeline: RecognitionPipeline,
        validator: IRegistryValidator,
        repository: IPlateRepository,
        broadcaster: EventBroadcaster,
        event_sinks: Iterable[IEventPublisher] = (),
    ):
        self.pipeline = pipeline
        self.validator = validator
        self.repository = repository
        self.broadcaster = broadcaster
        self.event_sinks = list(event_sinks)

    async def scan(self, encoded_image: bytes) -> Tuple[RecognitionOutcome, Optional[PlateRecord]]:
        outcome = await asyncio.to_thread(self.pipeline.run, encoded_image)
        if not outcome.detected:
            return outcome, None

        record = await asyncio.to_thread(
            self.repository.create,
            PlateRecordInput(
                plate_number=outcome.plate_number,
                region=outcome.region,
                status=outcome.status,
                detection_type=DetectionType.AUTOMATIC,
                details=outcome.details or "",
            ),
        )
        metrics.plates_persisted_total.labels(detection_type=record.detection_type.value).inc()
        logger.info("🚗 Placa detectada id=%d plate=%s status=%s conf=%.2f",
                    record.id, record.plate_number, record.status.value, outcome.confidence)

        await self._distribute(BroadcastEvent(type=EventType.PLATE_DETECTED, data=record))
        return outcome, record

    async def validate_manual(
        self,
        plate_number: str,
        detection_type: DetectionType = DetectionType.MANUAL,
    ) -> PlateRecord:
        plate_number = plate_number.strip().upper()
        if not plate_number:
            raise ValueError("Número de placa vacío")
        validation = self.validator.validate(plate_number)
        record = await asyncio.to_thread(
            self.repository.create,
            PlateRecordInput(
                plate_number=plate_number,
                region=validation.region,
                status=validation.status,
                detection_type=detection_type,
                details=validation.details,
            ),
        )
        metrics.plates_persisted_total.labels(detection_type=record.detection_type.value).inc()
        logger.info("⌨️ Placa validada id=%d plate=%s status=%s",
                    record.id, record.plate_number, record.status.value)

        await self._distribute(BroadcastEvent(type=EventType.PLATE_VALIDATED, data=record))
        return record

    async def _distribute(self, event: BroadcastEvent) -> None:
        try:
            await self.broadcaster.publish(event)
        except Exception:
            logger.exception("Error difundiendo evento %s id=%s", event.type.value, event.data.id)

        for sink in self.event_sinks:
            try:
                await asyncio.to_thread(sink.publish, event)
            except Exception:
                logger.exception("Sink %s no pudo publicar evento id=%s",
                                 type(sink).__name__, event.data.id)
