# src/application/recognition_pipeline.py
import logging
import time
from typing import Optional

from src.core.config import settings
from src.domain.Interfaces.image_preprocessor import IImagePreprocessor
from src.domain.Interfaces.plate_recognizer import IPlateRecognizer
from src.domain.Interfaces.region_detector import IRegionDetector
from src.domain.Interfaces.registry_validator import IRegistryValidator
from src.domain.Models.recognition_outcome import RecognitionOutcome
from src.domain.exceptions import DecodeError
from src.monitoring import metrics

logger = logging.getLogger(__name__)


class RecognitionPipeline:
    """
    preprocess -> región -> reconocimiento -> umbral de confianza -> validación.

    Cualquier etapa puede terminar en "no detectado". Ninguna excepción sale
    del pipeline: todo error interno se convierte en RecognitionOutcome(detected=False).
    Sin estado entre ejecuciones; se puede llamar en paralelo desde varios hilos.
    """

    def __init__(
        self,
        preprocessor: IImagePreprocessor,
        region_detector: IRegionDetector,
        recognizer: IPlateRecognizer,
        validator: IRegistryValidator,
        confidence_threshold: Optional[float] = None,
    ):
        self.preprocessor = preprocessor
        self.region_detector = region_detector
        self.recognizer = recognizer
        self.validator = validator
        self.confidence_threshold = (
            confidence_threshold
            if confidence_threshold is not None
            else settings.confidence_threshold
        )

    def run(self, encoded_image: bytes) -> RecognitionOutcome:
        t0 = time.perf_counter()
        try:
            outcome, label = self._run_stages(encoded_image)
        except DecodeError as ex:
            logger.info("Imagen no decodificable: %s", ex)
            outcome, label = RecognitionOutcome.not_detected(), "decode_error"
        except Exception:
            logger.exception("Error inesperado en el pipeline de reconocimiento")
            outcome, label = RecognitionOutcome.not_detected(), "error"

        total = time.perf_counter() - t0
        metrics.recognition_outcomes_total.labels(outcome=label).inc()
        metrics.pipeline_latency.observe(total)
        logger.debug("Pipeline terminado: outcome=%s total=%.3fs", label, total)
        return outcome

    def _run_stages(self, encoded_image: bytes):
        # 1) Preprocesado: valida la imagen (DecodeError sube hasta run)
        with _timed("preprocess"):
            self.preprocessor.preprocess(encoded_image)

        # 2) Región de interés sobre la imagen original; el detector
        #    binariza por su cuenta y el localizador necesita los píxeles reales
        with _timed("region"):
            region = self.region_detector.detect_region(encoded_image)
        if region is None:
            return RecognitionOutcome.not_detected(), "no_region"

        # 3) Reconocimiento
        with _timed("recognize"):
            candidate = self.recognizer.recognize(region)
        if candidate is None:
            return RecognitionOutcome.not_detected(), "no_text"

        # 4) Umbral de confianza
        if candidate.confidence < self.confidence_threshold:
            logger.debug("Candidato %s descartado (conf=%.3f < %.2f)",
                         candidate.plate_text, candidate.confidence, self.confidence_threshold)
            return RecognitionOutcome.not_detected(), "low_confidence"

        # 5) Validación en registro (total, no falla)
        with _timed("validate"):
            validation = self.validator.validate(candidate.plate_text)

        return RecognitionOutcome(
            detected=True,
            plate_number=candidate.plate_text,
            region=validation.region,
            status=validation.status,
            details=validation.details,
            confidence=candidate.confidence,
        ), "detected"


class _timed:
    def __init__(self, stage: str):
        self.stage = stage

    def __enter__(self):
        self.t0 = time.perf_counter()

    def __exit__(self, exc_type, exc, tb):
        metrics.stage_latency.labels(stage=self.stage).observe(time.perf_counter() - self.t0)
        return False
