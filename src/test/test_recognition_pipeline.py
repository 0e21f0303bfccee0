import numpy as np
import pytest

from conftest import FixedRecognizer
from src.application.recognition_pipeline import RecognitionPipeline
from src.domain.Models.detection_result import BoundingBox
from src.domain.Models.plate_record import PlateStatus
from src.infrastructure.Detector.preprocessing_region_detector import PreprocessingRegionDetector
from src.infrastructure.Imaging.opencv_image_preprocessor import OpenCVImagePreprocessor
from src.infrastructure.Registry.simulated_registry_validator import SimulatedRegistryValidator


class NoRegionDetector:
    def detect_region(self, encoded_image):
        return None


class ExplodingValidator:
    def validate(self, plate_text):
        raise RuntimeError("registry down")


class RecordingLocalizer:
    def __init__(self):
        self.distinct_values = None

    def locate(self, image):
        self.distinct_values = len(np.unique(image))
        return BoundingBox(x=5, y=5, width=30, height=20)


class ExplodingRecognizer:
    def recognize(self, region):
        raise RuntimeError("model crashed")


def build(recognizer, region_detector=None, validator=None, threshold=0.60):
    pre = OpenCVImagePreprocessor()
    return RecognitionPipeline(
        preprocessor=pre,
        region_detector=region_detector or PreprocessingRegionDetector(pre),
        recognizer=recognizer,
        validator=validator or SimulatedRegistryValidator(),
        confidence_threshold=threshold,
    )


class TestRecognitionPipeline:

    def test_end_to_end_detection(self, color_image_bytes):
        outcome = build(FixedRecognizer("ABC-123", 0.9)).run(color_image_bytes)
        assert outcome.detected
        assert outcome.plate_number == "ABC-123"
        assert outcome.confidence == 0.9
        assert outcome.status == PlateStatus.SUSPENDED   # último carácter '3'
        assert outcome.region == "Ontario"               # longitud 7
        assert outcome.details == "La plaque est suspendue"

    @pytest.mark.parametrize("confidence", [0.0, 0.3, 0.59, 0.5999])
    def test_below_threshold_is_not_detected(self, color_image_bytes, confidence):
        outcome = build(FixedRecognizer("XYZ-789", confidence)).run(color_image_bytes)
        assert outcome.to_dict() == {"detected": False}

    def test_threshold_is_inclusive(self, color_image_bytes):
        assert build(FixedRecognizer("XYZ-789", 0.60)).run(color_image_bytes).detected

    def test_undecodable_image(self):
        recognizer = FixedRecognizer()
        outcome = build(recognizer).run(b"not an image")
        assert not outcome.detected
        assert recognizer.calls == 0

    def test_no_region(self, color_image_bytes):
        recognizer = FixedRecognizer()
        assert not build(recognizer, region_detector=NoRegionDetector()).run(color_image_bytes).detected
        assert recognizer.calls == 0

    def test_no_text(self, color_image_bytes):
        assert not build(FixedRecognizer(text=None)).run(color_image_bytes).detected

    def test_internal_errors_never_escape(self, color_image_bytes):
        assert not build(ExplodingRecognizer()).run(color_image_bytes).detected
        assert not build(FixedRecognizer(), validator=ExplodingValidator()).run(color_image_bytes).detected

    def test_outcome_serialization(self, color_image_bytes):
        data = build(FixedRecognizer("XYZ-789", 0.8)).run(color_image_bytes).to_dict()
        assert data == {
            "detected": True,
            "plateNumber": "XYZ-789",
            "region": "Ontario",
            "status": "valid",
            "details": "Plaque en règle",
            "confidence": 0.8,
        }

    def test_localizer_sees_original_pixels(self, color_image_bytes):
        localizer = RecordingLocalizer()
        pre = OpenCVImagePreprocessor()
        pipeline = build(FixedRecognizer("ABC-123", 0.9),
                         region_detector=PreprocessingRegionDetector(pre, localizer=localizer))
        assert pipeline.run(color_image_bytes).detected
        # La imagen binarizada sólo tiene dos valores (0 y 255)
        assert localizer.distinct_values > 2
