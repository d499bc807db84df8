from PIL import Image, ImageFilter, ImageOps

from recon.ocr.base import BaseImagePreprocessor


class BinarizingPreprocessor(BaseImagePreprocessor):
    """Grayscale -> autocontrast -> sharpen -> fixed-threshold binarization.

    Contrast is normalized before sharpening so noise is not amplified, and
    binarization runs last so the earlier filters work on continuous tone.
    """

    def __init__(self, threshold: int = 128, contrast_cutoff: float = 1.0) -> None:
        self._threshold = threshold
        self._cutoff = contrast_cutoff

    def preprocess(self, image: Image.Image) -> Image.Image:
        gray = image.convert("L")
        normalized = ImageOps.autocontrast(gray, cutoff=self._cutoff)
        sharpened = normalized.filter(ImageFilter.SHARPEN)
        threshold = self._threshold
        return sharpened.point(lambda x: 255 if x > threshold else 0, mode="1")
