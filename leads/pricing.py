"""
Purpose: What a provider pays for receiving a lead.
What it does:
Prices a lead as a share of the job value, adjusted for urgency and
for how many providers are competing for it, within fixed bounds.
"""

from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP

LEAD_PRICE_SHARE = 0.05
URGENT_MULTIPLIER = 1.3
COMPETITION_STEP = 0.1
MIN_LEAD_PRICE = 15.0
MAX_LEAD_PRICE = 150.0


def round_money(amount: float) -> float:
    """
    Round to cents, half-up.
    """
    return float(Decimal(str(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def calculate_lead_price(estimated_job_value: float, is_urgent: bool, competition_level: int) -> float:
    """
    base = 5% of the job value
    urgent leads cost 30% more
    every competing provider adds 10%
    result is clamped to [15, 150]
    """
    price = max(estimated_job_value, 0.0) * LEAD_PRICE_SHARE

    if is_urgent:
        price *= URGENT_MULTIPLIER

    price *= 1 + max(competition_level, 0) * COMPETITION_STEP

    return round_money(max(MIN_LEAD_PRICE, min(price, MAX_LEAD_PRICE)))
