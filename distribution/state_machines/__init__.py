from .distribution_state import (
    accept_distribution,
    decline_distribution,
    expire_distribution,
    mark_viewed,
)
from .lead_state import expire_lead, transition_lead_to_accepted, transition_lead_to_sent

__all__ = [
    "accept_distribution",
    "decline_distribution",
    "expire_distribution",
    "mark_viewed",
    "expire_lead",
    "transition_lead_to_accepted",
    "transition_lead_to_sent",
]
