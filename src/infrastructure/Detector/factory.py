from typing import Optional

from src.core.config import settings
from src.domain.Interfaces.plate_localizer import IPlateLocalizer
from src.domain.Interfaces.region_detector import IRegionDetector
from src.infrastructure.Detector.preprocessing_region_detector import PreprocessingRegionDetector
from src.infrastructure.Imaging.opencv_image_preprocessor import OpenCVImagePreprocessor


def create_plate_localizer() -> Optional[IPlateLocalizer]:
    backend = settings.localizer_backend.lower()
    if backend == "yolo":
        from src.infrastructure.Detector.yolo_plate_localizer import YOLOPlateLocalizer
        return YOLOPlateLocalizer()
    if backend in ("", "none"):
        return None
    raise ValueError(f"LOCALIZER_BACKEND desconocido: {settings.localizer_backend}")


def create_region_detector() -> IRegionDetector:
    return PreprocessingRegionDetector(
        preprocessor=OpenCVImagePreprocessor(),
        localizer=create_plate_localizer(),
    )
