from src.core.config import settings
from src.domain.Interfaces.plate_recognizer import IPlateRecognizer


def create_plate_recognizer() -> IPlateRecognizer:
    backend = settings.recognizer_backend.lower()
    if backend == "easyocr":
        from src.infrastructure.OCR.EasyOCR_PlateRecognizer import EasyOCRPlateRecognizer
        return EasyOCRPlateRecognizer()
    if backend == "simulated":
        from src.infrastructure.OCR.simulated_plate_recognizer import SimulatedPlateRecognizer
        return SimulatedPlateRecognizer()
    raise ValueError(f"RECOGNIZER_BACKEND desconocido: {settings.recognizer_backend}")
