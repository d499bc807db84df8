class ExtractionError(Exception):
    """Raised when a candidate item block lacks a required field."""
