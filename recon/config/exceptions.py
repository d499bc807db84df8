class ConfigurationError(ValueError):
    """Raised at startup when thresholds or limits are out of range."""
