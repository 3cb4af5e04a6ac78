from datetime import date, timedelta

import pytest

from leads.models import LeadStatus
from distribution.dispatcher import LeadDistributor
from distribution.errors import DistributionStateError, ValidationError
from distribution.models import DistributionStatus
from distribution.responses import LeadResponseService
from factories import NOW, make_lead


@pytest.fixture
def offers(store, sink):
    """
    A medium lead fanned out to all three seeded providers, keyed by provider id.
    """
    store.add_lead(make_lead(total_price=1000))
    created = LeadDistributor(store, notification_sink=sink).distribute_lead("lead-1", now=NOW)
    return {d.provider_id: d for d in created}


def test_view_marks_the_offer_and_is_repeatable(store, offers):
    service = LeadResponseService(store)
    offer = offers["provider-3"]

    viewed = service.view(offer.id, now=NOW)
    again = service.view(offer.id, now=NOW + timedelta(minutes=5))

    assert viewed.status == DistributionStatus.VIEWED
    assert again.viewed_at == NOW
    assert store.get_distribution(offer.id).status == DistributionStatus.VIEWED


def test_accept_creates_job_and_revokes_other_offers(store, offers):
    service = LeadResponseService(store)
    later = NOW + timedelta(minutes=20)

    service.view(offers["provider-1"].id, now=NOW)
    job = service.accept(offers["provider-2"].id, now=later)

    # 1. Job at the recorded auto-bid
    assert job.provider_id == "provider-2"
    assert job.final_price == 650.00
    assert job.scheduled_date == later.date()
    assert store.jobs_for_lead("lead-1")[0].job_id == job.job_id

    # 2. Lead is taken
    assert store.get_lead("lead-1").status == LeadStatus.ACCEPTED

    # 3. Winner accepted, everyone else expired
    accepted = store.get_distribution(offers["provider-2"].id)
    assert accepted.status == DistributionStatus.ACCEPTED
    assert accepted.responded_at == later
    assert store.get_distribution(offers["provider-1"].id).status == DistributionStatus.EXPIRED
    assert store.get_distribution(offers["provider-3"].id).status == DistributionStatus.EXPIRED


def test_accept_without_bid_uses_estimate_and_preferred_date(store, sink):
    store.add_lead(make_lead(total_price=None, price_range_min=600, price_range_max=900, preferred_date=date(2026, 4, 1)))
    created = LeadDistributor(store, notification_sink=sink).distribute_lead("lead-1", now=NOW)
    basic_offer = next(d for d in created if d.provider_id == "provider-3")

    job = LeadResponseService(store).accept(basic_offer.id, now=NOW)

    assert job.final_price == 900.0
    assert job.scheduled_date == date(2026, 4, 1)


def test_accept_with_explicit_bid_overrides_the_auto_bid(store, offers):
    job = LeadResponseService(store).accept(offers["provider-1"].id, 720.0, now=NOW)

    assert job.final_price == 720.0
    assert store.get_distribution(offers["provider-1"].id).bid_amount == 720.0


def test_second_acceptance_loses_the_race(store, offers):
    service = LeadResponseService(store)
    service.accept(offers["provider-1"].id, now=NOW)

    with pytest.raises(DistributionStateError):
        service.accept(offers["provider-3"].id, now=NOW)

    assert len(store.jobs_for_lead("lead-1")) == 1


def test_decline_records_reason_and_keeps_lead_open(store, offers):
    service = LeadResponseService(store)

    declined = service.decline(offers["provider-1"].id, "too far", now=NOW)

    assert declined.status == DistributionStatus.DECLINED
    assert declined.response_reason == "too far"
    assert declined.responded_at == NOW
    assert store.get_lead("lead-1").status == LeadStatus.SENT


def test_declined_offer_cannot_be_accepted(store, offers):
    service = LeadResponseService(store)
    service.decline(offers["provider-1"].id, now=NOW)

    with pytest.raises(DistributionStateError):
        service.accept(offers["provider-1"].id, now=NOW)

    # Nothing from the failed attempt survives
    assert store.jobs_for_lead("lead-1") == []
    assert store.get_lead("lead-1").status == LeadStatus.SENT


def test_lead_expires_once_every_offer_is_closed(store, offers):
    service = LeadResponseService(store)

    service.decline(offers["provider-1"].id, now=NOW)
    service.expire(offers["provider-2"].id)
    assert store.get_lead("lead-1").status == LeadStatus.SENT

    expired = service.expire(offers["provider-3"].id)

    assert expired.status == DistributionStatus.EXPIRED
    assert expired.responded_at is None
    assert store.get_lead("lead-1").status == LeadStatus.EXPIRED


def test_unknown_distribution_is_rejected(store):
    with pytest.raises(ValidationError):
        LeadResponseService(store).view("nope")
