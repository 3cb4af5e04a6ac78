#Expose the high-level distribution pieces:
#Scoring / ranking
#Fan-out orchestrator (distribute_lead)
#Auto-assignment (auto_assign)
#Provider responses (view / accept / decline / expire)

from .errors import AssignmentError, DistributionStateError, DuplicateDistributionError, ValidationError
from .models import AssignmentResult, AssignmentState, Distribution, DistributionStatus, LeadNotification
from .scoring import calculate_recipient_count, rank_providers, score_provider
from .dispatcher import LeadDistributor
from .auto_assign import AutoAssigner
from .responses import LeadResponseService
from .stats import provider_lead_stats
from .store import InMemoryMarketplaceStore, MarketplaceStore

__all__ = [
    "AssignmentError",
    "DistributionStateError",
    "DuplicateDistributionError",
    "ValidationError",
    "AssignmentResult",
    "AssignmentState",
    "Distribution",
    "DistributionStatus",
    "LeadNotification",
    "calculate_recipient_count",
    "rank_providers",
    "score_provider",
    "LeadDistributor",
    "AutoAssigner",
    "LeadResponseService",
    "provider_lead_stats",
    "InMemoryMarketplaceStore",
    "MarketplaceStore",
]
