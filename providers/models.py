"""
Purpose: Core data models for the providers domain.
What it does:
Defines the structure of a Provider, its service areas and its auto-bid
configuration without relying on any ORM.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple


class ProviderStatus(str, Enum):
    ACTIVE = "ACTIVE"
    PENDING = "PENDING"
    SUSPENDED = "SUSPENDED"


class SubscriptionTier(str, Enum):
    BASIC = "BASIC"
    PROFESSIONAL = "PROFESSIONAL"
    ELITE = "ELITE"


class BidStrategy(str, Enum):
    PERCENTAGE_BELOW = "PERCENTAGE_BELOW"
    FIXED_AMOUNT = "FIXED_AMOUNT"


@dataclass(frozen=True)
class ServiceArea:
    """
    A geographic unit a provider accepts leads from.
    """
    zip_code: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    is_primary: bool = False


@dataclass(frozen=True)
class AutoBidConfig:
    enabled: bool = False
    strategy: Optional[BidStrategy] = None
    percentage: Optional[float] = None
    fixed_amount: Optional[float] = None

    # Ceiling the provider is willing to pay per lead; feeds the bid score.
    max_bid_amount: float = 0.0

    # Job value window, None means unbounded on that side
    min_job_value: Optional[float] = None
    max_job_value: Optional[float] = None

    max_jobs_per_day: int = 5


@dataclass(frozen=True)
class Provider:
    """
    A stateless snapshot of a Provider at a specific point in time.
    `jobs_today` is filled in by the store when the snapshot is read.
    """
    id: str
    business_name: str
    status: ProviderStatus = ProviderStatus.PENDING
    tier: SubscriptionTier = SubscriptionTier.BASIC
    service_areas: Tuple[ServiceArea, ...] = ()

    lead_credits: int = 0
    response_time_minutes: float = 60.0
    acceptance_rate: float = 0.0
    rating: float = 0.0
    total_jobs: int = 0

    auto_bid: AutoBidConfig = field(default_factory=AutoBidConfig)
    jobs_today: int = 0

    @classmethod
    def new(
        cls,
        provider_id: str,
        business_name: str,
        zip_codes: Tuple[str, ...] = (),
        status: str | ProviderStatus = ProviderStatus.ACTIVE,
        tier: str | SubscriptionTier = SubscriptionTier.BASIC,
        **kwargs,
    ) -> Provider:
        if isinstance(status, str):
            status = ProviderStatus(status)
        if isinstance(tier, str):
            tier = SubscriptionTier(tier)

        # First zip in the list is treated as the home area
        areas = tuple(
            ServiceArea(zip_code=zip_code, is_primary=index == 0)
            for index, zip_code in enumerate(zip_codes)
        )
        return cls(
            id=provider_id,
            business_name=business_name,
            status=status,
            tier=tier,
            service_areas=areas,
            **kwargs,
        )
