"""
Purpose: Domain models for the Leads capability.
What it does:
- Defines core data structures:
- Lead (id, pickup zip/city/state, price estimate or range, urgency, items, status)
- LeadItem (item type + quantity)
- Job (job_id, lead_id, provider_id, final price, scheduled date, status)

Defines enums/constants:
- LeadStatus = PENDING | SENT | ACCEPTED | BOOKED | EXPIRED
- JobStatus = PENDING | SCHEDULED | IN_PROGRESS | COMPLETED | CANCELLED

Rule: No store access, no distribution logic. Models only.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import List, Optional
import uuid


class LeadStatus(Enum):
    PENDING = "PENDING"
    SENT = "SENT"
    ACCEPTED = "ACCEPTED"
    BOOKED = "BOOKED"
    EXPIRED = "EXPIRED"


class JobStatus(Enum):
    PENDING = "PENDING"
    SCHEDULED = "SCHEDULED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


@dataclass(frozen=True)
class LeadItem:
    item_type: str
    quantity: int = 1


@dataclass
class Lead:
    """
    An incoming service request (a "quote") waiting to be matched with providers.
    """

    id: str
    pickup_zip: Optional[str] = None
    pickup_city: Optional[str] = None
    pickup_state: Optional[str] = None

    # A quote carries either a computed total or a min/max range
    total_price: Optional[float] = None
    price_range_min: Optional[float] = None
    price_range_max: Optional[float] = None

    is_urgent: bool = False
    items: List[LeadItem] = field(default_factory=list)
    preferred_date: Optional[date] = None

    status: LeadStatus = LeadStatus.PENDING
    created_at: datetime = field(default_factory=datetime.now)

    @property
    def estimated_value(self) -> Optional[float]:
        """
        Best available price estimate: the total, else the top of the range,
        else the bottom of it. Non-positive values count as missing.
        """
        for value in (self.total_price, self.price_range_max, self.price_range_min):
            if value is not None and value > 0:
                return float(value)
        return None


@dataclass
class Job:
    """
    Created once a lead is won, either by a provider accepting it
    or by auto-assignment.
    """
    job_id: str
    lead_id: str
    provider_id: str
    final_price: float
    scheduled_date: Optional[date] = None
    status: JobStatus = JobStatus.PENDING

    created_at: datetime = field(default_factory=datetime.now)

    @staticmethod  # Factory method so callers never hand-roll ids
    def new(lead_id: str, provider_id: str, final_price: float, scheduled_date: Optional[date] = None) -> Job:
        return Job(
            job_id=str(uuid.uuid4()),
            lead_id=lead_id,
            provider_id=provider_id,
            final_price=final_price,
            scheduled_date=scheduled_date,
        )
