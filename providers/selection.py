"""
Purpose: Hard eligibility rules for choosing which providers may see a lead.
What it does:
Accepts a Lead and a pool of providers and filters out everyone who is
not active, does not serve the pickup location, does not take jobs of
this size, or is already fully booked today.

Output: "rule-qualified providers" (still not ranked).
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from leads.models import Lead
from .models import AutoBidConfig, Provider, ProviderStatus, ServiceArea


def _normalize(value: Optional[str]) -> str:
    return (value or "").strip().lower()


def area_matches_location(area: ServiceArea, lead: Lead) -> bool:
    """
    Exact zip match. Only a lead without a zip falls back to an exact
    city + state match (case-insensitive).
    """
    lead_zip = _normalize(lead.pickup_zip)
    if lead_zip:
        return _normalize(area.zip_code) == lead_zip

    lead_city = _normalize(lead.pickup_city)
    lead_state = _normalize(lead.pickup_state)
    if lead_city and lead_state:
        return _normalize(area.city) == lead_city and _normalize(area.state) == lead_state

    return False


def matching_service_areas(provider: Provider, lead: Lead) -> List[ServiceArea]:
    return [area for area in provider.service_areas if area_matches_location(area, lead)]


def is_primary_for(provider: Provider, lead: Lead) -> bool:
    """
    True when any of the provider's areas covering this lead is a primary one.
    """
    return any(area.is_primary for area in matching_service_areas(provider, lead))


def within_job_value_range(config: AutoBidConfig, estimated_value: Optional[float]) -> bool:
    """
    A None bound means no constraint on that side.
    Without an estimate only unbounded providers pass.
    """
    if estimated_value is None:
        return config.min_job_value is None and config.max_job_value is None

    if config.min_job_value is not None and estimated_value < config.min_job_value:
        return False
    if config.max_job_value is not None and estimated_value > config.max_job_value:
        return False
    return True


def has_capacity_today(provider: Provider) -> bool:
    return provider.jobs_today < provider.auto_bid.max_jobs_per_day


def is_eligible(provider: Provider, lead: Lead, *, check_capacity: bool = True) -> bool:
    if provider.status != ProviderStatus.ACTIVE:
        return False

    if not matching_service_areas(provider, lead):
        return False

    if not within_job_value_range(provider.auto_bid, lead.estimated_value):
        return False

    return not check_capacity or has_capacity_today(provider)


def filter_eligible_providers(
    lead: Lead,
    providers: Iterable[Provider],
    *,
    require_credits: bool = False,
    require_auto_bid: bool = False,
    check_capacity: bool = True,
) -> List[Provider]:
    """
    Returns only providers who may receive this lead, in input order.

    require_credits: fan-out path, skip providers with no lead credits left.
    require_auto_bid: auto-assignment path, skip providers without auto-bid.
    check_capacity: False defers the daily job cap to the caller, so it can
        tell "nobody serves this" apart from "everybody is booked".

    An empty result is a normal outcome, not an error.
    """
    eligible = []

    for provider in providers:
        if require_credits and provider.lead_credits <= 0:
            continue

        if require_auto_bid and not provider.auto_bid.enabled:
            continue

        if not is_eligible(provider, lead, check_capacity=check_capacity):
            continue

        eligible.append(provider)

    return eligible
