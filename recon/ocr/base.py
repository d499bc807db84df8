from abc import ABC, abstractmethod
from collections.abc import Sequence
from pathlib import Path

from PIL import Image

from recon.ocr.models import RecognitionResult


class BaseRasterizer(ABC):
    """Contract for converting PDF pages to image files."""

    @abstractmethod
    def rasterize(self, pdf_bytes: bytes, scale: float, output_dir: Path) -> list[Path]:
        """Render every page to an image file inside output_dir.

        Returns:
            Image paths in page order.

        Raises:
            RasterizationError: if the document cannot be rendered at all.
        """


class BaseImagePreprocessor(ABC):
    """Contract for page image cleanup before recognition."""

    @abstractmethod
    def preprocess(self, image: Image.Image) -> Image.Image:
        """Return a cleaned copy of image ready for recognition."""


class BaseRecognitionEngine(ABC):
    """Contract for all OCR engine adapters."""

    @abstractmethod
    def recognize(self, image: Image.Image, languages: Sequence[str]) -> RecognitionResult:
        """Recognize text on one page image.

        Args:
            image: Preprocessed page image.
            languages: Engine language codes, most likely language first.

        Raises:
            RecognitionError: if the engine fails on this image.
        """
