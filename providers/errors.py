class ValidationError(Exception):
    """Raised when a bid configuration, settings update or lead is malformed. Nothing is written."""
    pass
