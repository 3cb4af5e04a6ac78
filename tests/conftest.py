import pytest

from providers.models import AutoBidConfig, BidStrategy, ServiceArea, SubscriptionTier
from distribution.store import InMemoryMarketplaceStore
from factories import RecordingNotificationSink, make_provider


@pytest.fixture
def elite_provider():
    return make_provider(
        "provider-1",
        tier=SubscriptionTier.ELITE,
        service_areas=(
            ServiceArea(zip_code="94102", is_primary=True),
            ServiceArea(zip_code="94103"),
            ServiceArea(zip_code="94104"),
        ),
        lead_credits=35,
        response_time_minutes=15,
        acceptance_rate=85,
        auto_bid=AutoBidConfig(enabled=True, strategy=BidStrategy.PERCENTAGE_BELOW, percentage=10, max_bid_amount=75),
    )


@pytest.fixture
def professional_provider():
    return make_provider(
        "provider-2",
        tier=SubscriptionTier.PROFESSIONAL,
        service_areas=(ServiceArea(zip_code="94102"), ServiceArea(zip_code="94105")),
        lead_credits=12,
        response_time_minutes=30,
        acceptance_rate=72,
        auto_bid=AutoBidConfig(enabled=True, strategy=BidStrategy.FIXED_AMOUNT, fixed_amount=650, max_bid_amount=50),
    )


@pytest.fixture
def basic_provider():
    return make_provider(
        "provider-3",
        tier=SubscriptionTier.BASIC,
        service_areas=(ServiceArea(zip_code="94102"),),
        lead_credits=3,
        response_time_minutes=60,
        acceptance_rate=65,
        auto_bid=AutoBidConfig(enabled=False, max_bid_amount=25),
    )


@pytest.fixture
def sink():
    return RecordingNotificationSink()


@pytest.fixture
def store(elite_provider, professional_provider, basic_provider):
    store = InMemoryMarketplaceStore()
    for provider in (elite_provider, professional_provider, basic_provider):
        store.add_provider(provider)
    return store
