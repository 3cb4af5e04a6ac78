"""
Purpose: Ranking model (the "who gets the lead first" layer).
What it does:
Takes providers that already passed eligibility and computes a composite
priority score from weighted signals:

  tier           40%   ELITE=100, PROFESSIONAL=70, BASIC=40
  response time  20%   max(0, 100 - minutes)
  acceptance     20%   acceptance rate (0-100) as is
  bid            10%   min(100, max_bid_amount), auto-bid providers only
  credits        10%   min(credits / 10, 1) * 100
  urgency        +20   flat, urgent lead and tier above BASIC

Produces a ranked list (descending, stable) and decides how many of the
head of that list receive the lead.

Rule: Scoring never touches the store. A bad bid config costs the provider
its bid, never the whole ranking.
"""

from __future__ import annotations

import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional, Sequence

from leads.models import Lead
from providers.bidding import calculate_bid
from providers.errors import ValidationError
from providers.models import Provider, SubscriptionTier
from providers.policy import DistributionPolicy, default_distribution_policy
from .models import RankedProvider

logger = logging.getLogger(__name__)

TIER_WEIGHT = 0.4
RESPONSE_TIME_WEIGHT = 0.2
ACCEPTANCE_RATE_WEIGHT = 0.2
BID_WEIGHT = 0.1
CREDIT_WEIGHT = 0.1
URGENCY_BONUS = 20

TIER_SCORES = {
    SubscriptionTier.ELITE.value: 100,
    SubscriptionTier.PROFESSIONAL.value: 70,
    SubscriptionTier.BASIC.value: 40,
}
DEFAULT_TIER_SCORE = 40


def _tier_value(tier) -> str:
    return getattr(tier, "value", tier)


def score_provider(provider: Provider, *, is_urgent: bool) -> float:
    """
    Composite score for one provider. Pure: identical inputs give identical scores.
    Malformed numbers (negative credits, rates, ...) are clamped, never raised.
    """
    tier = _tier_value(provider.tier)
    score = TIER_SCORES.get(tier, DEFAULT_TIER_SCORE) * TIER_WEIGHT

    # Faster responders score higher
    response_time = max(provider.response_time_minutes, 0)
    score += max(0, 100 - response_time) * RESPONSE_TIME_WEIGHT

    acceptance_rate = min(max(provider.acceptance_rate, 0), 100)
    score += acceptance_rate * ACCEPTANCE_RATE_WEIGHT

    if provider.auto_bid.enabled:
        max_bid = max(provider.auto_bid.max_bid_amount, 0)
        score += min(100, (max_bid / 100) * 100) * BID_WEIGHT

    credits = max(provider.lead_credits, 0)
    score += min(credits / 10, 1) * 100 * CREDIT_WEIGHT

    if is_urgent and tier != SubscriptionTier.BASIC.value:
        score += URGENCY_BONUS

    return score


def to_priority(score: float) -> int:
    return int(Decimal(str(score)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def rank_providers(providers: Sequence[Provider], lead: Lead) -> List[RankedProvider]:
    """
    Score every provider and sort descending by score.
    Ties keep input order (sort is stable).
    A provider with a broken auto-bid setup is still ranked, just without a bid.
    """
    estimate: Optional[float] = lead.estimated_value
    ranked = []

    for provider in providers:
        score = score_provider(provider, is_urgent=lead.is_urgent)

        bid_amount = None
        if estimate is not None:
            try:
                bid_amount = calculate_bid(provider.auto_bid, estimate)
            except ValidationError as exc:
                logger.warning("Ignoring bid of provider %s for lead %s: %s", provider.id, lead.id, exc)

        ranked.append(
            RankedProvider(
                provider_id=provider.id,
                score=score,
                priority=to_priority(score),
                estimated_response_time=provider.response_time_minutes,
                bid_amount=bid_amount,
            )
        )

    ranked.sort(key=lambda candidate: candidate.score, reverse=True)
    return ranked


def calculate_recipient_count(estimated_value: float, policy: Optional[DistributionPolicy] = None) -> int:
    """
    Small jobs go to 2 providers, medium jobs to 3, large jobs to 4.
    """
    policy = policy or default_distribution_policy()

    if estimated_value < policy.small_job_threshold:
        return policy.small_job_recipients
    if estimated_value < policy.medium_job_threshold:
        return policy.medium_job_recipients
    return policy.large_job_recipients


def select_recipients(
    ranked: Sequence[RankedProvider],
    estimated_value: float,
    policy: Optional[DistributionPolicy] = None,
) -> List[RankedProvider]:
    """
    Head of the ranked list. With fewer eligible providers than the
    recipient count, everyone is selected.
    """
    return list(ranked[: calculate_recipient_count(estimated_value, policy)])
