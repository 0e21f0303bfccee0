import logging
from typing import Optional

from src.core.config import settings
from src.domain.Interfaces.plate_recognizer import IPlateRecognizer
from src.domain.Interfaces.text_normalizer import ITextNormalizer
from src.domain.Models.detection_result import DetectionResult
from src.infrastructure.Imaging.opencv_image_preprocessor import decode_image
from src.infrastructure.Normalizer.plate_normalizer import PlateNormalizer

logger = logging.getLogger(__name__)


class EasyOCRPlateRecognizer(IPlateRecognizer):
    """
    Reconocedor de producción usando EasyOCR:
    - toma el resultado de mayor confianza
    - normaliza al formato AAA-999; si no encaja, no hay placa (None)
    """

    def __init__(self, reader=None, normalizer: Optional[ITextNormalizer] = None):
        if reader is None:
            import easyocr
            reader = easyocr.Reader([settings.ocr_lang], gpu=settings.ocr_gpu)
        self.reader = reader
        self.normalizer = normalizer or PlateNormalizer()

    def recognize(self, region: bytes) -> Optional[DetectionResult]:
        image = decode_image(region)
        results = self.reader.readtext(image)
        if not results:
            return None

        # (bbox, text, confidence)
        for _, text, confidence in sorted(results, key=lambda r: r[2], reverse=True):
            plate_text = self.normalizer.normalize(text)
            if not plate_text:
                logger.debug("Texto OCR descartado: %r", text)
                continue
            confidence = min(1.0, max(0.0, float(confidence)))
            return DetectionResult(plate_text=plate_text, confidence=confidence)

        return None
