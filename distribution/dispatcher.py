"""
Purpose: Fan-out orchestrator (the "glue").
What it does:
Accepts a lead id, finds who may receive it, ranks them, picks the head of
the ranking and records one SENT distribution per selected provider.
Credits are deducted and providers notified afterwards on a best-effort
basis: neither can undo or block the distributions already written.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import List, Optional

from providers.policy import DistributionPolicy, default_distribution_policy
from providers.selection import filter_eligible_providers
from .errors import DistributionStateError, DuplicateDistributionError, ValidationError
from .models import Distribution, LeadNotification, RankedProvider
from .notifications import LoggingNotificationSink, NotificationSink
from .scoring import rank_providers, select_recipients
from .state_machines.lead_state import ASSIGNABLE_STATUSES, transition_lead_to_sent
from .store import MarketplaceStore

logger = logging.getLogger(__name__)


class LeadDistributor:
    """
    Sends one lead to the top-K providers for competitive response.
    Stateless apart from its collaborators, so one instance can serve every request.
    """
    def __init__(
        self,
        store: MarketplaceStore,
        notification_sink: Optional[NotificationSink] = None,
        policy: Optional[DistributionPolicy] = None,
    ):
        self.store = store
        self.notification_sink = notification_sink or LoggingNotificationSink()
        self.policy = policy or default_distribution_policy()

    def distribute_lead(
        self,
        lead_id: str,
        *,
        now: Optional[datetime] = None,
        today: Optional[date] = None,
    ) -> List[Distribution]:
        """
        Returns the distributions created in this call. An empty list means
        nobody could receive the lead; the lead is then left as it was.
        """
        now = now or datetime.now()
        today = today or now.date()

        lead = self.store.get_lead(lead_id)
        if lead is None:
            raise ValidationError(f"Lead {lead_id} not found")

        if lead.status not in ASSIGNABLE_STATUSES:
            raise DistributionStateError(f"Lead {lead_id} can no longer be distributed. Current: {lead.status}")

        estimated_value = lead.estimated_value
        if estimated_value is None:
            raise ValidationError(f"Lead {lead_id} has no estimated value")

        # 1. Hard eligibility gates
        candidates = self.store.find_providers_for(lead, today)
        eligible = filter_eligible_providers(
            lead,
            candidates,
            require_credits=self.policy.require_credits_for_fanout,
        )
        if not eligible:
            logger.info("No eligible providers for lead %s", lead_id)
            return []

        # 2. Rank and cut to the recipient count for this job size
        ranked = rank_providers(eligible, lead)
        selected = select_recipients(ranked, estimated_value, self.policy)
        auto_bidders = {provider.id for provider in eligible if provider.auto_bid.enabled}

        # 3. Record the offers
        created: List[Distribution] = []
        sent: List[RankedProvider] = []
        with self.store.transaction():
            for candidate in selected:
                distribution = Distribution.new(
                    lead_id=lead.id,
                    provider_id=candidate.provider_id,
                    sent_at=now,
                    bid_amount=candidate.bid_amount if candidate.provider_id in auto_bidders else None,
                )
                try:
                    self.store.create_distribution(distribution)
                except DuplicateDistributionError:
                    logger.warning("Lead %s already sent to provider %s, skipping", lead.id, candidate.provider_id)
                    continue
                created.append(distribution)
                sent.append(candidate)

            if created:
                current = self.store.get_lead(lead.id)
                transition_lead_to_sent(current)
                self.store.save_lead(current)

        logger.info("Distributed lead %s to %d providers", lead.id, len(created))

        self._deduct_credits(sent)
        self._notify(lead.id, sent)
        return created

    # -------------------------
    # Best-effort side effects
    # -------------------------

    def _deduct_credits(self, recipients: List[RankedProvider]) -> None:
        amount = self.policy.credits_per_distribution
        if amount <= 0:
            return

        for recipient in recipients:
            try:
                self.store.deduct_credits(recipient.provider_id, amount)
            except Exception:
                logger.exception("Failed to deduct %d credits from provider %s", amount, recipient.provider_id)

    def _notify(self, lead_id: str, recipients: List[RankedProvider]) -> None:
        if not recipients:
            return

        notifications = [
            LeadNotification(
                provider_id=recipient.provider_id,
                lead_id=lead_id,
                priority=recipient.priority,
                estimated_response_time=recipient.estimated_response_time,
            )
            for recipient in recipients
        ]
        try:
            self.notification_sink.notify(notifications)
        except Exception:
            logger.exception("Failed to notify providers about lead %s", lead_id)
