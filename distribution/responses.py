"""
Purpose: Provider responses to a lead that was fanned out to them.
What it does:
- view:    SENT -> VIEWED
- accept:  SENT|VIEWED -> ACCEPTED, creates the Job, lead -> ACCEPTED,
           every other open offer for the lead -> EXPIRED
- decline: SENT|VIEWED -> DECLINED
- expire:  SENT|VIEWED -> EXPIRED (timeout)

Once no offer for a SENT lead is left open the lead itself expires.
Every response runs inside one store transaction.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional

from leads.models import Job, LeadStatus
from .errors import DistributionStateError, ValidationError
from .models import Distribution
from .state_machines.distribution_state import (
    OPEN_STATUSES,
    accept_distribution,
    decline_distribution,
    expire_distribution,
    mark_viewed,
)
from .state_machines.lead_state import expire_lead, transition_lead_to_accepted
from .store import MarketplaceStore

logger = logging.getLogger(__name__)


class LeadResponseService:
    def __init__(self, store: MarketplaceStore):
        self.store = store

    def view(self, distribution_id: str, now: Optional[datetime] = None) -> Distribution:
        with self.store.transaction():
            distribution = self._get(distribution_id)
            mark_viewed(distribution, now)
            self.store.save_distribution(distribution)
        return distribution

    def accept(
        self,
        distribution_id: str,
        bid_amount: Optional[float] = None,
        *,
        now: Optional[datetime] = None,
        today: Optional[date] = None,
    ) -> Job:
        """
        Race resolver: only the first acceptance for a lead goes through,
        later ones fail with DistributionStateError.
        """
        now = now or datetime.now()

        with self.store.transaction():
            distribution = self._get(distribution_id)
            lead = self.store.get_lead(distribution.lead_id)
            if lead is None:
                raise ValidationError(f"Lead {distribution.lead_id} not found")
            if lead.status == LeadStatus.ACCEPTED:
                raise DistributionStateError(f"Lead {lead.id} was already accepted by another provider")

            accept_distribution(distribution, bid_amount, now)
            self.store.save_distribution(distribution)

            final_price = distribution.bid_amount
            if final_price is None:
                final_price = lead.estimated_value
            if final_price is None:
                raise ValidationError(f"Lead {lead.id} has no price to accept at")

            job = Job.new(
                lead_id=lead.id,
                provider_id=distribution.provider_id,
                final_price=final_price,
                scheduled_date=lead.preferred_date or today or now.date(),
            )
            self.store.create_job(job)

            transition_lead_to_accepted(lead)
            self.store.save_lead(lead)

            # Revoke the offer from everyone else still looking at it
            for other in self.store.distributions_for_lead(lead.id):
                if other.id != distribution.id and other.status in OPEN_STATUSES:
                    expire_distribution(other)
                    self.store.save_distribution(other)

        logger.info("Provider %s accepted lead %s (job %s)", distribution.provider_id, lead.id, job.job_id)
        return job

    def decline(
        self,
        distribution_id: str,
        reason: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Distribution:
        with self.store.transaction():
            distribution = self._get(distribution_id)
            decline_distribution(distribution, reason, now)
            self.store.save_distribution(distribution)
            self._expire_lead_if_exhausted(distribution.lead_id)

        logger.info("Provider %s declined lead %s. Reason: %s", distribution.provider_id, distribution.lead_id, reason)
        return distribution

    def expire(self, distribution_id: str) -> Distribution:
        with self.store.transaction():
            distribution = self._get(distribution_id)
            expire_distribution(distribution)
            self.store.save_distribution(distribution)
            self._expire_lead_if_exhausted(distribution.lead_id)
        return distribution

    # -------------------------
    # Internal helpers
    # -------------------------

    def _get(self, distribution_id: str) -> Distribution:
        distribution = self.store.get_distribution(distribution_id)
        if distribution is None:
            raise ValidationError(f"Distribution {distribution_id} not found")
        return distribution

    def _expire_lead_if_exhausted(self, lead_id: str) -> None:
        lead = self.store.get_lead(lead_id)
        if lead is None or lead.status != LeadStatus.SENT:
            return

        if any(d.status in OPEN_STATUSES for d in self.store.distributions_for_lead(lead_id)):
            return

        expire_lead(lead)
        self.store.save_lead(lead)
        logger.info("Lead %s expired, no provider took it", lead_id)
