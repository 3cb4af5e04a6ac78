"""
Purpose: How a provider has been responding to the leads sent to them.
"""

from __future__ import annotations

from dataclasses import dataclass

from .models import DistributionStatus
from .store import MarketplaceStore


@dataclass(frozen=True)
class ProviderLeadStats:
    total: int
    accepted: int
    declined: int
    pending: int
    acceptance_rate: float


def provider_lead_stats(store: MarketplaceStore, provider_id: str) -> ProviderLeadStats:
    distributions = store.distributions_for_provider(provider_id)

    total = len(distributions)
    accepted = sum(1 for d in distributions if d.status == DistributionStatus.ACCEPTED)
    declined = sum(1 for d in distributions if d.status == DistributionStatus.DECLINED)
    pending = sum(1 for d in distributions if d.status == DistributionStatus.SENT)

    return ProviderLeadStats(
        total=total,
        accepted=accepted,
        declined=declined,
        pending=pending,
        acceptance_rate=(accepted / total) * 100 if total > 0 else 0.0,
    )
