class AcquisitionError(Exception):
    """Raised when a document cannot be opened or parsed at all."""
