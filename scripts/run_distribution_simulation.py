import logging
import os
import random
import time
from datetime import date
from typing import List

import pandas as pd

from leads.models import Lead
from providers.models import AutoBidConfig, BidStrategy, Provider
from providers.policy import policy_from_env
from distribution.auto_assign import AutoAssigner
from distribution.dispatcher import LeadDistributor
from distribution.errors import AssignmentError, DistributionStateError, ValidationError
from distribution.responses import LeadResponseService
from distribution.store import InMemoryMarketplaceStore


class SilentNotificationSink:
    def notify(self, notifications):
        pass # Notifications are summarized in the results file instead.


def _optional_float(value):
    return float(value) if pd.notna(value) and value != "" else None


def load_providers(filepath="mock_providers.csv") -> List[Provider]:
    base_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    df = pd.read_csv(os.path.join(base_dir, filepath), dtype={"zip_codes": str})

    providers = []
    for row in df.to_dict("records"):
        strategy = row["bid_strategy"] if pd.notna(row["bid_strategy"]) else None
        auto_bid = AutoBidConfig(
            enabled=bool(row["auto_bid_enabled"]),
            strategy=BidStrategy(strategy) if strategy else None,
            percentage=_optional_float(row["bid_percentage"]),
            fixed_amount=_optional_float(row["bid_fixed_amount"]),
            max_bid_amount=float(row["max_bid_amount"]),
            max_jobs_per_day=int(row["max_jobs_per_day"]),
        )
        providers.append(
            Provider.new(
                row["provider_id"],
                row["business_name"],
                zip_codes=tuple(str(row["zip_codes"]).split("|")),
                status=row["status"],
                tier=row["tier"],
                lead_credits=int(row["lead_credits"]),
                response_time_minutes=float(row["response_time_minutes"]),
                acceptance_rate=float(row["acceptance_rate"]),
                rating=float(row["rating"]),
                total_jobs=int(row["total_jobs"]),
                auto_bid=auto_bid,
            )
        )
    return providers


def load_leads(filepath="mock_leads.csv", limit=100) -> List[Lead]:
    base_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    df = pd.read_csv(os.path.join(base_dir, filepath), dtype={"pickup_zip": str}).head(limit)

    return [
        Lead(
            id=row["lead_id"],
            pickup_zip=row["pickup_zip"],
            pickup_city=row["pickup_city"],
            pickup_state=row["pickup_state"],
            total_price=_optional_float(row["total_price"]),
            price_range_min=_optional_float(row["price_range_min"]),
            price_range_max=_optional_float(row["price_range_max"]),
            is_urgent=bool(row["is_urgent"]),
            preferred_date=date.fromisoformat(row["preferred_date"]) if pd.notna(row["preferred_date"]) else None,
        )
        for row in df.to_dict("records")
    ]


def run_simulation(auto_assign_share=0.4, acceptance_probability=0.6):
    logging.basicConfig(level=logging.WARNING)
    print("=== STARTING LEAD DISTRIBUTION SIMULATION ===")

    # 1. Load Data
    providers = load_providers()
    leads = load_leads(limit=100)
    print(f"Loaded {len(leads)} Leads and {len(providers)} Providers.\n")

    # 2. Configure System
    store = InMemoryMarketplaceStore()
    for provider in providers:
        store.add_provider(provider)
    for lead in leads:
        store.add_lead(lead)

    distributor = LeadDistributor(store, notification_sink=SilentNotificationSink(), policy=policy_from_env())
    assigner = AutoAssigner(store)
    responses = LeadResponseService(store)

    # 3. Route every lead through auto-assignment or fan-out
    rows = []
    start_time = time.time()
    for lead in leads:
        row = {"lead_id": lead.id, "estimated_value": lead.estimated_value, "path": "", "recipients": 0,
               "outcome": "", "provider_id": "", "price": None}

        if random.random() < auto_assign_share:
            row["path"] = "auto_assign"
            try:
                result = assigner.auto_assign(lead)
            except (AssignmentError, ValidationError) as exc:
                row["outcome"] = f"ERROR: {exc}"
            else:
                row["outcome"] = result.state.value if result.success else result.message
                row["provider_id"] = result.provider_id or ""
                row["price"] = result.bid_amount
            rows.append(row)
            continue

        row["path"] = "fan_out"
        try:
            offers = distributor.distribute_lead(lead.id)
        except (ValidationError, DistributionStateError) as exc:
            row["outcome"] = f"ERROR: {exc}"
            rows.append(row)
            continue

        row["recipients"] = len(offers)
        row["outcome"] = "NO_RECIPIENTS" if not offers else "EXPIRED"

        # Simulation: each provider independently decides, the first "yes" wins
        for offer in offers:
            responses.view(offer.id)
            if random.random() < acceptance_probability:
                job = responses.accept(offer.id)
                row.update(outcome="ACCEPTED", provider_id=offer.provider_id, price=job.final_price)
                break
            responses.decline(offer.id, "simulated decline")

        rows.append(row)

    print(f"Processed {len(leads)} leads in {time.time() - start_time:.2f}s.\n")

    # 4. Report
    base_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    output_path = os.path.join(base_dir, "distribution_results.csv")
    df = pd.DataFrame(rows)
    df.to_csv(output_path, index=False)

    print("--- Outcomes per path ---")
    print(df.groupby(["path", "outcome"]).size().to_string())
    print("\n=== SIMULATION COMPLETE ===")
    print(f"Leads Won: {int(df['provider_id'].astype(bool).sum())} / {len(df)}")
    print(f"Results written to '{output_path}'.")


if __name__ == "__main__":
    run_simulation()
