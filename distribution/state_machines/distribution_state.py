from datetime import datetime
from typing import Optional

from distribution.errors import DistributionStateError
from distribution.models import Distribution, DistributionStatus

# Statuses a provider can still respond from
OPEN_STATUSES = (DistributionStatus.SENT, DistributionStatus.VIEWED)


def mark_viewed(distribution: Distribution, now: Optional[datetime] = None) -> Distribution:
    """
    Called when a provider opens the lead. Viewing twice is harmless.
    """
    if distribution.status == DistributionStatus.VIEWED:
        return distribution

    if distribution.status != DistributionStatus.SENT:
        raise DistributionStateError(f"Cannot mark distribution {distribution.id} VIEWED from {distribution.status}")

    distribution.status = DistributionStatus.VIEWED
    distribution.viewed_at = now or datetime.now()
    return distribution


def accept_distribution(
    distribution: Distribution,
    bid_amount: Optional[float] = None,
    now: Optional[datetime] = None,
) -> Distribution:
    if distribution.status not in OPEN_STATUSES:
        raise DistributionStateError(f"Distribution {distribution.id} already responded to ({distribution.status})")

    distribution.status = DistributionStatus.ACCEPTED
    distribution.responded_at = now or datetime.now()
    if bid_amount is not None:
        distribution.bid_amount = bid_amount
    return distribution


def decline_distribution(
    distribution: Distribution,
    reason: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Distribution:
    if distribution.status not in OPEN_STATUSES:
        raise DistributionStateError(f"Distribution {distribution.id} already responded to ({distribution.status})")

    distribution.status = DistributionStatus.DECLINED
    distribution.responded_at = now or datetime.now()
    distribution.response_reason = reason
    return distribution


def expire_distribution(distribution: Distribution) -> Distribution:
    """
    Timeout path. Nothing is recorded as a response.
    """
    if distribution.status not in OPEN_STATUSES:
        raise DistributionStateError(f"Cannot expire distribution {distribution.id} from {distribution.status}")

    distribution.status = DistributionStatus.EXPIRED
    return distribution
