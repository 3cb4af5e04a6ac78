from datetime import date, datetime
from typing import List

from leads.models import Lead, LeadItem
from providers.models import Provider, ProviderStatus, ServiceArea, SubscriptionTier
from distribution.models import LeadNotification

TODAY = date(2026, 3, 2)
NOW = datetime(2026, 3, 2, 9, 30)


class RecordingNotificationSink:
    def __init__(self):
        self.batches: List[List[LeadNotification]] = []

    def notify(self, notifications):
        self.batches.append(list(notifications))


class ExplodingNotificationSink:
    def notify(self, notifications):
        raise ConnectionError("push gateway unreachable")


def make_provider(provider_id: str, **overrides) -> Provider:
    fields = dict(
        id=provider_id,
        business_name=f"{provider_id} Hauling",
        status=ProviderStatus.ACTIVE,
        tier=SubscriptionTier.PROFESSIONAL,
        service_areas=(ServiceArea(zip_code="94102", city="San Francisco", state="CA"),),
        lead_credits=10,
        response_time_minutes=30,
        acceptance_rate=70,
        rating=4.5,
        total_jobs=20,
    )
    fields.update(overrides)
    return Provider(**fields)


def make_lead(lead_id: str = "lead-1", **overrides) -> Lead:
    fields = dict(
        id=lead_id,
        pickup_zip="94102",
        pickup_city="San Francisco",
        pickup_state="CA",
        total_price=1000.0,
        items=[LeadItem("couch", 1), LeadItem("mattress", 2)],
    )
    fields.update(overrides)
    return Lead(**fields)
