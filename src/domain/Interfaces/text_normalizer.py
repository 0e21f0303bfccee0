from typing import Protocol


class ITextNormalizer(Protocol):
    """
    Lleva texto OCR crudo al alfabeto de placas de la jurisdicción.
    Devuelve "" si el texto no puede ser una placa.
    """
    def normalize(self, text: str) -> str: ...
