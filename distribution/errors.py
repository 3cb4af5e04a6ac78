from providers.errors import ValidationError


class AssignmentError(Exception):
    """Raised when an auto-assignment cannot be committed. The store is left untouched."""
    pass


class DuplicateDistributionError(Exception):
    """Raised by the store when a lead was already distributed to a provider."""

    def __init__(self, lead_id: str, provider_id: str) -> None:
        super().__init__(f"Lead {lead_id} was already distributed to provider {provider_id}")
        self.lead_id = lead_id
        self.provider_id = provider_id


class DistributionStateError(Exception):
    """Raised when an invalid distribution or lead transition is attempted."""
    pass


__all__ = [
    "ValidationError",
    "AssignmentError",
    "DuplicateDistributionError",
    "DistributionStateError",
]
