"""
Purpose: Applies a provider's auto-bid settings update.
What it does:
Validates the requested strategy and limits, clears the fields the chosen
strategy does not use, and returns the updated Provider snapshot.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Optional

from .bidding import validate_bid_config
from .errors import ValidationError
from .models import AutoBidConfig, BidStrategy, Provider


def update_auto_bid_settings(
    provider: Provider,
    *,
    enabled: bool,
    strategy: str | BidStrategy | None = None,
    percentage: Optional[float] = None,
    fixed_amount: Optional[float] = None,
    max_jobs_per_day: Optional[int] = None,
    min_job_value: Optional[float] = None,
    max_job_value: Optional[float] = None,
) -> Provider:
    """
    Because Provider is a frozen dataclass, a new instance is returned.
    Raises ValidationError before anything changes.
    """
    if isinstance(strategy, str):
        try:
            strategy = BidStrategy(strategy)
        except ValueError:
            raise ValidationError(f"Unknown bid strategy: {strategy}") from None

    if enabled:
        if strategy is None:
            raise ValidationError("Valid bid strategy is required when auto-bid is enabled")
        validate_bid_config(strategy, percentage, fixed_amount)
    else:
        strategy = None

    current = provider.auto_bid
    max_jobs = current.max_jobs_per_day if max_jobs_per_day is None else max_jobs_per_day
    if max_jobs < 1:
        raise ValidationError("max_jobs_per_day must be >= 1")

    if min_job_value is not None and max_job_value is not None and min_job_value > max_job_value:
        raise ValidationError("min_job_value cannot exceed max_job_value")

    config = AutoBidConfig(
        enabled=enabled,
        strategy=strategy,
        percentage=percentage if strategy == BidStrategy.PERCENTAGE_BELOW else None,
        fixed_amount=fixed_amount if strategy == BidStrategy.FIXED_AMOUNT else None,
        max_bid_amount=current.max_bid_amount,
        min_job_value=min_job_value,
        max_job_value=max_job_value,
        max_jobs_per_day=max_jobs,
    )
    return replace(provider, auto_bid=config)
