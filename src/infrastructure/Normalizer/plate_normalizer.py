# src/infrastructure/Normalizer/plate_normalizer.py
import re
from src.domain.Interfaces.text_normalizer import ITextNormalizer


class PlateNormalizer(ITextNormalizer):
    """
    Normaliza texto OCR de placas al formato AAA-999:
    - Mayúsculas
    - Quitar separadores habituales y ruido
    - Confusiones típicas del OCR según la posición (O/0, I/1, S/5, B/8...)
    - Rechazar ("") si no quedan 3 letras + 3 dígitos
    """
    _ALNUM = re.compile(r"[^A-Z0-9]")
    _TO_LETTER = {"0": "O", "1": "I", "2": "Z", "5": "S", "8": "B", "6": "G"}
    _TO_DIGIT = {v: k for k, v in _TO_LETTER.items()}

    def normalize(self, text: str) -> str:
        if not text:
            return ""

        t = self._ALNUM.sub("", text.strip().upper())
        if len(t) != 6:
            return ""

        letters = "".join(self._TO_LETTER.get(c, c) for c in t[:3])
        digits = "".join(self._TO_DIGIT.get(c, c) for c in t[3:])
        if not (letters.isalpha() and digits.isdigit()):
            return ""

        return f"{letters}-{digits}"
