from recon.config.settings import Settings
from recon.ocr.base import BaseRecognitionEngine
from recon.ocr.tesseract_adapter import TesseractAdapter


class RecognitionEngineFactory:
    """Creates the configured OCR engine adapter."""

    ADAPTERS: dict[str, type[BaseRecognitionEngine]] = {
        "tesseract": TesseractAdapter,
    }

    @classmethod
    def create(cls, settings: Settings) -> BaseRecognitionEngine:
        engine = settings.ocr_engine.lower()
        adapter_cls = cls.ADAPTERS.get(engine)
        if adapter_cls is None:
            raise ValueError(
                f"Unknown OCR engine '{engine}'. Choose from: {list(cls.ADAPTERS)}"
            )
        return adapter_cls()
