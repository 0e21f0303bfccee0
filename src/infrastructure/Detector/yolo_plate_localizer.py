import logging
from typing import Optional

import numpy as np

from src.core.config import settings
from src.domain.Interfaces.plate_localizer import IPlateLocalizer
from src.domain.Models.detection_result import BoundingBox

logger = logging.getLogger(__name__)


class YOLOPlateLocalizer(IPlateLocalizer):
    """
    Localizador de placas usando YOLO (ultralytics).
    Devuelve la caja de mayor confianza por encima del umbral.
    """

    def __init__(self, model=None, conf_threshold: Optional[float] = None, iou_threshold: Optional[float] = None):
        if model is None:
            from ultralytics import YOLO
            model = YOLO(settings.yolo_model_path)
            logger.info("Modelo YOLO cargado desde %s", settings.yolo_model_path)
        self.model = model
        self.conf_threshold = conf_threshold if conf_threshold is not None else settings.yolo_conf
        self.iou_threshold = iou_threshold if iou_threshold is not None else settings.yolo_iou

    def locate(self, image: np.ndarray) -> Optional[BoundingBox]:
        if image.ndim == 3 and image.shape[2] == 4:
            image = image[:, :, :3]

        results = self.model.predict(
            source=image,
            conf=self.conf_threshold,
            iou=self.iou_threshold,
            verbose=False
        )
        if not results:
            return None

        best = None
        best_conf = 0.0
        for r in results[0].boxes:
            conf = float(r.conf[0])
            if conf < self.conf_threshold or conf <= best_conf:
                continue  # descartar detecciones poco confiables
            x1, y1, x2, y2 = map(int, r.xyxy[0])
            best = BoundingBox(x=x1, y=y1, width=x2 - x1, height=y2 - y1)
            best_conf = conf

        return best
