from leads.models import Lead, LeadStatus

from distribution.errors import DistributionStateError

# A lead can still be won while it is in one of these
ASSIGNABLE_STATUSES = (LeadStatus.PENDING, LeadStatus.SENT)


def transition_lead_to_sent(lead: Lead) -> Lead:
    """
    Called once a fan-out round created at least one distribution.
    Re-sending an already SENT lead is allowed.
    """
    if lead.status not in ASSIGNABLE_STATUSES:
        raise DistributionStateError(f"Cannot transition lead {lead.id} to SENT from {lead.status}")

    lead.status = LeadStatus.SENT
    return lead


def transition_lead_to_accepted(lead: Lead) -> Lead:
    """
    Called when a provider accepts the lead or auto-assignment picks a winner.
    """
    if lead.status not in ASSIGNABLE_STATUSES:
        raise DistributionStateError(f"Lead {lead.id} cannot be accepted. Current: {lead.status}")

    lead.status = LeadStatus.ACCEPTED
    return lead


def expire_lead(lead: Lead) -> Lead:
    if lead.status not in ASSIGNABLE_STATUSES:
        raise DistributionStateError(f"Cannot expire lead {lead.id} from {lead.status}")

    lead.status = LeadStatus.EXPIRED
    return lead
