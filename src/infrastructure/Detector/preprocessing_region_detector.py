# src/infrastructure/Detector/preprocessing_region_detector.py
import logging
from typing import Optional

from src.domain.Interfaces.image_preprocessor import IImagePreprocessor
from src.domain.Interfaces.plate_localizer import IPlateLocalizer
from src.domain.Interfaces.region_detector import IRegionDetector
from src.infrastructure.Imaging.opencv_image_preprocessor import decode_image, encode_png

logger = logging.getLogger(__name__)


class PreprocessingRegionDetector(IRegionDetector):
    """
    Extrae la ROI de la placa:
    1) preprocesa la imagen completa
    2) si hay localizador inyectado, recorta a su caja; sin caja -> None
    Sin localizador, la ROI es la imagen preprocesada completa.
    """

    def __init__(self, preprocessor: IImagePreprocessor, localizer: Optional[IPlateLocalizer] = None):
        self.preprocessor = preprocessor
        self.localizer = localizer

    def detect_region(self, encoded_image: bytes) -> Optional[bytes]:
        try:
            processed = self.preprocessor.preprocess(encoded_image)
            if self.localizer is None:
                return processed

            # El localizador trabaja sobre la imagen original, no binarizada
            box = self.localizer.locate(decode_image(encoded_image))
            if box is None:
                logger.debug("Localizador sin caja candidata")
                return None

            image = decode_image(processed)
            h, w = image.shape[:2]
            x1, y1 = max(0, box.x), max(0, box.y)
            x2, y2 = min(w, box.x + box.width), min(h, box.y + box.height)
            if x2 <= x1 or y2 <= y1:
                logger.debug("Caja fuera de la imagen: %s (img=%dx%d)", box, w, h)
                return None
            return encode_png(image[y1:y2, x1:x2])
        except Exception:
            logger.exception("Error al detectar la región de la placa")
            return None
