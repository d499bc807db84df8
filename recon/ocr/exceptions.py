class OcrError(Exception):
    """Base exception for all OCR-related errors."""


class RasterizationError(OcrError):
    """Raised when a scanned document cannot be converted to page images."""


class RecognitionError(OcrError):
    """Raised when the recognition engine fails on a single page."""
