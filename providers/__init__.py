"""
Providers domain package.

Public API:
- Domain models: Provider, ServiceArea, AutoBidConfig, ProviderStatus, SubscriptionTier, BidStrategy
- Eligibility: filter_eligible_providers
- Bidding: calculate_bid
- Configuration: DistributionPolicy
"""
from .models import AutoBidConfig, BidStrategy, Provider, ProviderStatus, ServiceArea, SubscriptionTier
from .errors import ValidationError
from .bidding import calculate_bid, validate_bid_config
from .selection import filter_eligible_providers, is_primary_for
from .settings import update_auto_bid_settings
from .policy import DistributionPolicy, default_distribution_policy, policy_from_env

__all__ = [
    "AutoBidConfig",
    "BidStrategy",
    "Provider",
    "ProviderStatus",
    "ServiceArea",
    "SubscriptionTier",
    "ValidationError",
    "calculate_bid",
    "validate_bid_config",
    "filter_eligible_providers",
    "is_primary_for",
    "update_auto_bid_settings",
    "DistributionPolicy",
    "default_distribution_policy",
    "policy_from_env",
]
