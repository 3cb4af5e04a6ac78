"""
Purpose: Turns a provider's auto-bid configuration into a money amount.
What it does:
- PERCENTAGE_BELOW p: bid = estimate * (1 - p/100), 0 <= p <= 50
- FIXED_AMOUNT f:     bid = f, f > 0
- anything else:      bid = estimate (a scoring input, not an actionable bid)

All bids are rounded to cents, half-up.
"""

from __future__ import annotations

from typing import Optional

from leads.pricing import round_money
from .errors import ValidationError
from .models import AutoBidConfig, BidStrategy

MAX_PERCENTAGE_BELOW = 50


def validate_bid_config(
    strategy: Optional[BidStrategy],
    percentage: Optional[float],
    fixed_amount: Optional[float],
) -> None:
    if strategy == BidStrategy.PERCENTAGE_BELOW:
        if percentage is None or not 0 <= percentage <= MAX_PERCENTAGE_BELOW:
            raise ValidationError(f"Bid percentage must be between 0 and {MAX_PERCENTAGE_BELOW}, got {percentage}")

    elif strategy == BidStrategy.FIXED_AMOUNT:
        if fixed_amount is None or fixed_amount <= 0:
            raise ValidationError(f"Fixed bid amount must be greater than 0, got {fixed_amount}")


def calculate_bid(config: AutoBidConfig, estimated_price: float) -> float:
    """
    Compute the bid for one provider. Raises ValidationError on a bad
    configuration instead of clamping it.
    """
    if not config.enabled or config.strategy is None:
        return round_money(estimated_price)

    validate_bid_config(config.strategy, config.percentage, config.fixed_amount)

    if config.strategy == BidStrategy.PERCENTAGE_BELOW:
        bid = estimated_price * (1 - config.percentage / 100)
    else:
        bid = config.fixed_amount

    return round_money(bid)
