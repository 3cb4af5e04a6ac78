"""
Purpose: Commits one lead directly to a single winning provider.
What it does:
Runs a small state machine over one lead:

  CANDIDATE_GATHERING -> BID_RANKING -> WINNER_SELECTED -> COMMITTED
          |                   |
          +-> NO_ASSIGNMENT <-+   (nobody eligible / everyone at capacity)

Winner = lowest bid, then primary service area, then highest rating,
then most completed jobs. The commit (accepted distribution + job + lead
status, revoked losing offers) is all-or-nothing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import List, Optional

from leads.models import Job, Lead
from providers.bidding import calculate_bid
from providers.models import Provider
from providers.selection import filter_eligible_providers, has_capacity_today, is_primary_for
from .errors import AssignmentError, DuplicateDistributionError
from .models import AssignmentResult, AssignmentState, Distribution, DistributionStatus
from .state_machines.distribution_state import OPEN_STATUSES, accept_distribution, expire_distribution
from .state_machines.lead_state import ASSIGNABLE_STATUSES, transition_lead_to_accepted
from .store import MarketplaceStore

logger = logging.getLogger(__name__)

NO_ESTIMATE = "estimate missing"
NO_ELIGIBLE_PROVIDERS = "no eligible providers"
ALL_AT_CAPACITY = "all providers at capacity"


@dataclass(frozen=True)
class BidCandidate:
    provider: Provider
    bid_amount: float
    is_primary_area: bool

    def sort_key(self):
        # ascending bid, primary first, then higher rating and experience first
        return (
            self.bid_amount,
            not self.is_primary_area,
            -self.provider.rating,
            -self.provider.total_jobs,
        )


def rank_bids(candidates: List[BidCandidate]) -> List[BidCandidate]:
    return sorted(candidates, key=lambda candidate: candidate.sort_key())


class AutoAssigner:
    """
    Picks exactly one provider for a lead, without any provider action.
    """
    def __init__(self, store: MarketplaceStore):
        self.store = store

    def auto_assign(
        self,
        lead: Lead,
        *,
        now: Optional[datetime] = None,
        today: Optional[date] = None,
    ) -> AssignmentResult:
        """
        Returns a COMMITTED or NO_ASSIGNMENT result.
        Raises ValidationError on a malformed bid configuration (nothing written)
        and AssignmentError when the commit fails (everything rolled back).
        The passed-in lead object is never modified.
        """
        now = now or datetime.now()
        today = today or now.date()

        trail: List[AssignmentState] = []

        estimated_price = lead.estimated_value
        if estimated_price is None:
            return self._no_assignment(lead, NO_ESTIMATE, trail)

        # CANDIDATE_GATHERING: auto-bidders serving this lead, capacity checked below
        self._enter(lead, trail, AssignmentState.CANDIDATE_GATHERING)
        providers = filter_eligible_providers(
            lead,
            self.store.find_providers_for(lead, today),
            require_auto_bid=True,
            check_capacity=False,
        )
        if not providers:
            return self._no_assignment(lead, NO_ELIGIBLE_PROVIDERS, trail)

        # BID_RANKING
        self._enter(lead, trail, AssignmentState.BID_RANKING)
        candidates = [
            BidCandidate(
                provider=provider,
                bid_amount=calculate_bid(provider.auto_bid, estimated_price),
                is_primary_area=is_primary_for(provider, lead),
            )
            for provider in providers
            if has_capacity_today(provider)
        ]
        if not candidates:
            return self._no_assignment(lead, ALL_AT_CAPACITY, trail)

        # WINNER_SELECTED
        winner = rank_bids(candidates)[0]
        self._enter(lead, trail, AssignmentState.WINNER_SELECTED)

        # COMMITTED
        job = self._commit(lead, winner, now=now, today=today)
        self._enter(lead, trail, AssignmentState.COMMITTED)

        logger.info("Lead %s assigned to %s at $%.2f", lead.id, winner.provider.business_name, winner.bid_amount)
        return AssignmentResult(
            state=AssignmentState.COMMITTED,
            message=f"Assigned to {winner.provider.business_name} at ${winner.bid_amount:.2f}",
            provider_id=winner.provider.id,
            provider_name=winner.provider.business_name,
            bid_amount=winner.bid_amount,
            job_id=job.job_id,
            decided_at=now,
            trail=tuple(trail),
        )

    # -------------------------
    # Internal helpers
    # -------------------------

    def _enter(self, lead: Lead, trail: List[AssignmentState], state: AssignmentState) -> None:
        trail.append(state)
        logger.debug("Auto-assignment of lead %s entered %s", lead.id, state.value)

    def _no_assignment(self, lead: Lead, reason: str, trail: List[AssignmentState]) -> AssignmentResult:
        logger.info("Lead %s not auto-assigned: %s", lead.id, reason)
        return AssignmentResult.no_assignment(reason, tuple(trail))

    def _commit(self, lead: Lead, winner: BidCandidate, *, now: datetime, today: date) -> Job:
        try:
            with self.store.transaction():
                stored = self.store.get_lead(lead.id)
                if stored is None:
                    raise AssignmentError(f"Lead {lead.id} not found")

                # Re-checked inside the transaction so two runs cannot both win
                already_won = any(d.is_winner for d in self.store.distributions_for_lead(lead.id))
                if already_won or stored.status not in ASSIGNABLE_STATUSES:
                    raise AssignmentError(f"Lead {lead.id} is already assigned")

                # Another lead may have booked the winner since candidates were gathered
                provider = winner.provider
                if self.store.today_job_count(provider.id, today) >= provider.auto_bid.max_jobs_per_day:
                    raise AssignmentError(f"Provider {provider.id} reached its daily job limit")

                winning = self._record_winner(lead.id, winner, now)
                for other in self.store.distributions_for_lead(lead.id):
                    if other.id != winning.id and other.status in OPEN_STATUSES:
                        expire_distribution(other)
                        self.store.save_distribution(other)

                job = Job.new(
                    lead_id=lead.id,
                    provider_id=winner.provider.id,
                    final_price=winner.bid_amount,
                    scheduled_date=lead.preferred_date or today,
                )
                self.store.create_job(job)

                transition_lead_to_accepted(stored)
                self.store.save_lead(stored)
        except AssignmentError:
            logger.exception("Auto-assignment of lead %s rejected", lead.id)
            raise
        except Exception as exc:
            logger.exception("Auto-assignment of lead %s failed during commit", lead.id)
            raise AssignmentError(f"Failed to commit assignment of lead {lead.id}: {exc}") from exc

        return job

    def _record_winner(self, lead_id: str, winner: BidCandidate, now: datetime) -> Distribution:
        """
        The winner may already hold an open offer from a fan-out round;
        that offer is upgraded instead of duplicated.
        """
        distribution = Distribution.new(
            lead_id=lead_id,
            provider_id=winner.provider.id,
            status=DistributionStatus.ACCEPTED,
            bid_amount=winner.bid_amount,
            is_winner=True,
            sent_at=now,
            responded_at=now,
        )
        try:
            return self.store.create_distribution(distribution)
        except DuplicateDistributionError:
            pass

        existing = next(
            d for d in self.store.distributions_for_lead(lead_id) if d.provider_id == winner.provider.id
        )
        if existing.status not in OPEN_STATUSES:
            raise AssignmentError(f"Provider {winner.provider.id} already responded to lead {lead_id}")

        accept_distribution(existing, winner.bid_amount, now)
        existing.is_winner = True
        self.store.save_distribution(existing)
        return existing
