from collections.abc import Sequence

import pytesseract
from PIL import Image
from pytesseract import Output

from recon.ocr.base import BaseRecognitionEngine
from recon.ocr.exceptions import RecognitionError
from recon.ocr.models import RecognitionResult, RecognizedWord


class TesseractAdapter(BaseRecognitionEngine):
    """Recognizes page images with Tesseract via pytesseract."""

    def __init__(self, config: str = "--psm 6") -> None:
        self._config = config

    def recognize(self, image: Image.Image, languages: Sequence[str]) -> RecognitionResult:
        lang = "+".join(languages) if languages else "eng"
        try:
            data = pytesseract.image_to_data(
                image, lang=lang, config=self._config, output_type=Output.DICT
            )
        except RecognitionError:
            raise
        except Exception as exc:
            raise RecognitionError(f"tesseract recognition failed: {exc}") from exc
        return self._build_result(data)

    @staticmethod
    def _build_result(data: dict[str, list[object]]) -> RecognitionResult:
        words: list[RecognizedWord] = []
        for idx, raw_text in enumerate(data.get("text", [])):
            text = str(raw_text).strip()
            try:
                confidence = float(str(data["conf"][idx]))
            except (KeyError, IndexError, ValueError):
                continue
            # tesseract reports -1 for layout rows that carry no word
            if not text or confidence < 0:
                continue
            line = (
                int(str(data["block_num"][idx])),
                int(str(data["par_num"][idx])),
                int(str(data["line_num"][idx])),
            )
            words.append(RecognizedWord(text=text, confidence=confidence, line=line))

        average = sum(w.confidence for w in words) / len(words) if words else 0.0
        return RecognitionResult(
            text=" ".join(w.text for w in words),
            words=words,
            confidence=average,
        )
