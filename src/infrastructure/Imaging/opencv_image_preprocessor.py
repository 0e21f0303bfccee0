# src/infrastructure/Imaging/opencv_image_preprocessor.py
import base64
import binascii
import logging
import re

import cv2
import numpy as np

from src.core.config import settings
from src.domain.Interfaces.image_preprocessor import IImagePreprocessor
from src.domain.exceptions import DecodeError

logger = logging.getLogger(__name__)

_DATA_URL_PREFIX = re.compile(r"^data:image/[\w.+-]+;base64,")

# Pesos de luminancia (R, G, B)
_LUMA_R, _LUMA_G, _LUMA_B = 0.299, 0.587, 0.114


def decode_image_payload(payload: str) -> bytes:
    """
    Convierte el payload que envían los clientes (data URL o base64 plano)
    en bytes de imagen codificada.
    """
    if not payload:
        raise DecodeError("Payload de imagen vacío")
    raw = _DATA_URL_PREFIX.sub("", payload.strip(), count=1)
    try:
        return base64.b64decode(raw, validate=True)
    except (binascii.Error, ValueError) as ex:
        raise DecodeError(f"Payload base64 inválido: {ex}") from ex


def decode_image(encoded_image: bytes) -> np.ndarray:
    """Decodifica bytes a ndarray (BGR, BGRA o gris) conservando alfa."""
    if not encoded_image:
        raise DecodeError("Imagen vacía")
    buf = np.frombuffer(encoded_image, dtype=np.uint8)
    image = cv2.imdecode(buf, cv2.IMREAD_UNCHANGED)
    if image is None:
        raise DecodeError("No se pudo decodificar la imagen")
    return image


def encode_png(image: np.ndarray) -> bytes:
    ok, encoded = cv2.imencode(".png", image)
    if not ok:
        raise DecodeError("No se pudo codificar la imagen procesada")
    return encoded.tobytes()


class OpenCVImagePreprocessor(IImagePreprocessor):
    """
    Preprocesado previo al OCR:
    - escala de grises por luminancia (0.299R + 0.587G + 0.114B)
    - binarizado con umbral fijo (gris > umbral -> 255, si no 0)
    - canal alfa intacto
    Salida PNG (sin pérdida), así que aplicarlo sobre su propia salida no cambia nada.
    """

    def __init__(self, threshold: int | None = None):
        self.threshold = threshold if threshold is not None else settings.binarize_threshold

    def preprocess(self, encoded_image: bytes) -> bytes:
        image = decode_image(encoded_image)
        return encode_png(self.binarize(image))

    def binarize(self, image: np.ndarray) -> np.ndarray:
        if image.dtype != np.uint8:
            # PNG de 16 bits: llevar a 8 bits antes del umbral
            image = (image / 257).astype(np.uint8)

        alpha = None
        if image.ndim == 2:
            gray = image.astype(np.float64)
        else:
            channels = image.shape[2]
            if channels == 4:
                alpha = image[:, :, 3]
            # OpenCV entrega BGR(A)
            b = image[:, :, 0].astype(np.float64)
            g = image[:, :, 1].astype(np.float64)
            r = image[:, :, 2].astype(np.float64)
            gray = _LUMA_R * r + _LUMA_G * g + _LUMA_B * b

        value = np.where(gray > self.threshold, 255, 0).astype(np.uint8)

        if image.ndim == 2:
            return value
        planes = [value, value, value]
        if alpha is not None:
            planes.append(alpha)
        return np.dstack(planes)
