import pytest

from providers.models import AutoBidConfig, ProviderStatus, ServiceArea
from providers.selection import filter_eligible_providers, is_primary_for
from factories import make_lead, make_provider


def test_only_active_providers_in_the_area_are_eligible():
    lead = make_lead(pickup_zip="94102")
    providers = [
        make_provider("active"),
        make_provider("suspended", status=ProviderStatus.SUSPENDED),
        make_provider("pending", status=ProviderStatus.PENDING),
        make_provider("elsewhere", service_areas=(ServiceArea(zip_code="10001", city="New York", state="NY"),)),
    ]

    eligible = filter_eligible_providers(lead, providers)

    assert [p.id for p in eligible] == ["active"]


def test_city_and_state_match_when_lead_has_no_zip():
    lead = make_lead(pickup_zip=None, pickup_city="oakland ", pickup_state="ca")
    providers = [
        make_provider("oakland", service_areas=(ServiceArea(city="Oakland", state="CA"),)),
        make_provider("oakland-nv", service_areas=(ServiceArea(city="Oakland", state="NV"),)),
    ]

    eligible = filter_eligible_providers(lead, providers)

    assert [p.id for p in eligible] == ["oakland"]


def test_city_and_state_are_ignored_when_lead_has_a_zip():
    lead = make_lead(pickup_zip="94102", pickup_city="San Francisco", pickup_state="CA")
    providers = [
        make_provider("same-zip", service_areas=(ServiceArea(zip_code="94102"),)),
        make_provider("other-zip", service_areas=(ServiceArea(zip_code="94110", city="San Francisco", state="CA"),)),
        make_provider("city-only", service_areas=(ServiceArea(city="San Francisco", state="CA"),)),
    ]

    eligible = filter_eligible_providers(lead, providers)

    assert [p.id for p in eligible] == ["same-zip"]


@pytest.mark.parametrize(
    "min_value, max_value, expected",
    [
        (None, None, True),
        (500, None, True),
        (1000, 1000, True),
        (1001, None, False),
        (None, 999, False),
    ],
)
def test_job_value_bounds_are_inclusive_and_none_means_unbounded(min_value, max_value, expected):
    lead = make_lead(total_price=1000)
    provider = make_provider("p", auto_bid=AutoBidConfig(min_job_value=min_value, max_job_value=max_value))

    assert bool(filter_eligible_providers(lead, [provider])) is expected


def test_providers_at_daily_capacity_are_excluded():
    lead = make_lead()
    full = make_provider("full", auto_bid=AutoBidConfig(max_jobs_per_day=2), jobs_today=2)
    free = make_provider("free", auto_bid=AutoBidConfig(max_jobs_per_day=2), jobs_today=1)

    assert [p.id for p in filter_eligible_providers(lead, [full, free])] == ["free"]

    # Deferring the cap lets the caller report capacity separately
    deferred = filter_eligible_providers(lead, [full, free], check_capacity=False)
    assert [p.id for p in deferred] == ["full", "free"]


def test_credit_and_auto_bid_gates():
    lead = make_lead()
    broke = make_provider("broke", lead_credits=0)
    bidder = make_provider("bidder", lead_credits=0, auto_bid=AutoBidConfig(enabled=True))
    funded = make_provider("funded", lead_credits=4)

    fan_out = filter_eligible_providers(lead, [broke, bidder, funded], require_credits=True)
    assert [p.id for p in fan_out] == ["funded"]

    # Auto-assignment does not need credits, it needs auto-bid
    auto = filter_eligible_providers(lead, [broke, bidder, funded], require_auto_bid=True)
    assert [p.id for p in auto] == ["bidder"]


def test_no_match_is_an_empty_list_not_an_error():
    lead = make_lead(pickup_zip="00000", pickup_city=None, pickup_state=None)

    assert filter_eligible_providers(lead, [make_provider("p")]) == []


def test_every_eligible_provider_satisfies_all_rules():
    """
    Sweep a mixed roster and check each returned provider against the rules directly.
    """
    lead = make_lead(total_price=800)
    roster = []
    for i in range(24):
        roster.append(
            make_provider(
                f"p{i}",
                status=[ProviderStatus.ACTIVE, ProviderStatus.SUSPENDED, ProviderStatus.PENDING][i % 3],
                service_areas=(ServiceArea(zip_code="94102" if i % 2 else "94110"),),
                auto_bid=AutoBidConfig(
                    min_job_value=[None, 900, 100][i % 3],
                    max_job_value=[None, 700, 2000, 800][i % 4],
                    max_jobs_per_day=3,
                ),
                jobs_today=i % 5,
            )
        )

    eligible = filter_eligible_providers(lead, roster)

    assert eligible
    for provider in eligible:
        config = provider.auto_bid
        assert provider.status == ProviderStatus.ACTIVE
        assert any(area.zip_code == lead.pickup_zip for area in provider.service_areas)
        assert config.min_job_value is None or config.min_job_value <= 800
        assert config.max_job_value is None or 800 <= config.max_job_value
        assert provider.jobs_today < config.max_jobs_per_day


def test_primary_flag_comes_from_the_matching_area_only():
    lead = make_lead(pickup_zip="94103")
    provider = make_provider(
        "p",
        service_areas=(ServiceArea(zip_code="94102", is_primary=True), ServiceArea(zip_code="94103")),
    )

    assert is_primary_for(provider, lead) is False
    assert is_primary_for(provider, make_lead(pickup_zip="94102")) is True
