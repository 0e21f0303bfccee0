import cv2
import numpy as np
import pytest

from src.domain.Models.detection_result import DetectionResult


def encode(image: np.ndarray, ext: str = ".png") -> bytes:
    ok, buf = cv2.imencode(ext, image)
    assert ok
    return buf.tobytes()


def decode(data: bytes) -> np.ndarray:
    return cv2.imdecode(np.frombuffer(data, dtype=np.uint8), cv2.IMREAD_UNCHANGED)


class FixedRecognizer:
    """Reconocedor de prueba con respuesta fija."""

    def __init__(self, text="ABC-123", confidence=0.9):
        self.text = text
        self.confidence = confidence
        self.calls = 0

    def recognize(self, region):
        self.calls += 1
        if self.text is None:
            return None
        return DetectionResult(plate_text=self.text, confidence=self.confidence)


class FakeConnection:
    """Conexión de suscriptor en memoria."""

    def __init__(self, open_=True, fail=False):
        self.open = open_
        self.fail = fail
        self.sent = []

    @property
    def is_open(self):
        return self.open

    async def send_text(self, message):
        if self.fail:
            raise ConnectionResetError("socket closed by peer")
        self.sent.append(message)


@pytest.fixture
def color_image_bytes():
    rng = np.random.default_rng(42)
    image = rng.integers(0, 256, size=(40, 60, 3), dtype=np.uint8)
    return encode(image)


@pytest.fixture
def fixed_recognizer():
    return FixedRecognizer()
