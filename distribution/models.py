"""
Purpose: Domain models for the distribution capability.
What it does:
- Distribution (one lead offered to one provider) and its status
- RankedProvider (a scored, eligible provider ready for fan-out)
- LeadNotification (what the notification sink receives)
- AssignmentState / AssignmentResult (outcome of auto-assignment)

Rule: No store access, no ranking logic. Models only.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple
import uuid


class DistributionStatus(Enum):
    SENT = "SENT"
    VIEWED = "VIEWED"
    ACCEPTED = "ACCEPTED"
    DECLINED = "DECLINED"
    EXPIRED = "EXPIRED"


class AssignmentState(Enum):
    CANDIDATE_GATHERING = "CANDIDATE_GATHERING"
    BID_RANKING = "BID_RANKING"
    WINNER_SELECTED = "WINNER_SELECTED"
    COMMITTED = "COMMITTED"
    NO_ASSIGNMENT = "NO_ASSIGNMENT"


@dataclass
class Distribution:
    """
    The record of offering a specific lead to a specific provider.
    Status only ever moves forward (see state_machines/distribution_state.py).
    """
    id: str
    lead_id: str
    provider_id: str
    status: DistributionStatus = DistributionStatus.SENT

    bid_amount: Optional[float] = None
    is_winner: bool = False
    response_reason: Optional[str] = None

    sent_at: Optional[datetime] = None
    viewed_at: Optional[datetime] = None
    responded_at: Optional[datetime] = None

    @staticmethod
    def new(lead_id: str, provider_id: str, **kwargs) -> Distribution:
        return Distribution(id=str(uuid.uuid4()), lead_id=lead_id, provider_id=provider_id, **kwargs)


@dataclass(frozen=True)
class RankedProvider:
    """
    Output of the scoring engine for one eligible provider.
    """
    provider_id: str
    score: float
    priority: int
    estimated_response_time: float
    bid_amount: Optional[float] = None


@dataclass(frozen=True)
class LeadNotification:
    provider_id: str
    lead_id: str
    priority: int
    estimated_response_time: float


@dataclass(frozen=True)
class AssignmentResult:
    """
    Outcome of an auto-assignment run. A NO_ASSIGNMENT result is not an error:
    callers usually leave the lead PENDING.
    """
    state: AssignmentState
    message: str
    provider_id: Optional[str] = None
    provider_name: Optional[str] = None
    bid_amount: Optional[float] = None
    job_id: Optional[str] = None
    decided_at: datetime = field(default_factory=datetime.now)

    # States passed through, in order, ending with the terminal one
    trail: Tuple[AssignmentState, ...] = ()

    @property
    def success(self) -> bool:
        return self.state == AssignmentState.COMMITTED

    @classmethod
    def no_assignment(cls, reason: str, trail: Tuple[AssignmentState, ...] = ()) -> AssignmentResult:
        return cls(state=AssignmentState.NO_ASSIGNMENT, message=reason, trail=trail + (AssignmentState.NO_ASSIGNMENT,))
