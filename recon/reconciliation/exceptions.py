class ReconciliationError(Exception):
    """Raised when a single reference row cannot be validated."""
