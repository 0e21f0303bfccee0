from abc import ABC, abstractmethod


class IImagePreprocessor(ABC):
    """
    Normaliza una imagen codificada para mejorar el reconocimiento posterior.
    """
    @abstractmethod
    def preprocess(self, encoded_image: bytes) -> bytes:
        """
        Devuelve la imagen procesada (codificada).
        Lanza DecodeError si la entrada no es una imagen válida.
        """
        pass
