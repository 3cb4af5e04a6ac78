import pandas as pd
import numpy as np
import uuid
from datetime import date, timedelta

# Zip codes of one metro area, so providers overlap and leads have competition
ZIP_CODES = ["94102", "94103", "94104", "94105", "94107", "94108", "94109", "94110"]
CITY = "San Francisco"
STATE = "CA"


def generate_mock_providers(num_providers=60, output_file="mock_providers.csv"):
    """
    Generates a provider roster for exercising fan-out and auto-assignment.
    Each provider serves 1-3 zips; the first one is their primary area.
    Roughly half of them run an auto-bid strategy.
    """
    data = []

    for provider_index in range(num_providers):
        zips = np.random.choice(ZIP_CODES, size=np.random.randint(1, 4), replace=False)
        auto_bid = np.random.random() < 0.5
        strategy = np.random.choice(["PERCENTAGE_BELOW", "FIXED_AMOUNT"]) if auto_bid else ""

        data.append({
            "provider_id": f"p_{str(provider_index+1).zfill(4)}",
            "business_name": f"Hauler {provider_index+1}",
            "status": np.random.choice(["ACTIVE", "PENDING", "SUSPENDED"], p=[0.85, 0.1, 0.05]),
            "tier": np.random.choice(["BASIC", "PROFESSIONAL", "ELITE"], p=[0.5, 0.35, 0.15]),
            "zip_codes": "|".join(zips),
            "lead_credits": np.random.randint(0, 40),
            "response_time_minutes": np.random.randint(5, 120),
            "acceptance_rate": np.round(np.random.uniform(30, 98), 1),
            "rating": np.round(np.random.uniform(3.0, 5.0), 1),
            "total_jobs": np.random.randint(0, 500),
            "auto_bid_enabled": auto_bid,
            "bid_strategy": strategy,
            "bid_percentage": np.random.randint(0, 31) if strategy == "PERCENTAGE_BELOW" else "",
            "bid_fixed_amount": np.round(np.random.uniform(150, 900), 2) if strategy == "FIXED_AMOUNT" else "",
            "max_bid_amount": np.round(np.random.uniform(0, 120), 2),
            "max_jobs_per_day": np.random.randint(1, 6),
        })

    df = pd.DataFrame(data)
    df.to_csv(output_file, index=False)
    print(f"Generated {num_providers} providers and saved to '{output_file}'")

    print("\nProviders per tier:")
    for tier, count in df["tier"].value_counts().items():
        print(f"  {tier}: {count}")


def generate_mock_leads(num_leads=200, output_file="mock_leads.csv"):
    """
    Generates quotes: about 70% carry a computed total, the rest only a price range.
    """
    data = []
    values = []
    today = date.today()

    for lead_index in range(num_leads):
        value = np.round(np.random.lognormal(mean=6.5, sigma=0.6), 2)
        has_total = np.random.random() < 0.7
        values.append(value)

        data.append({
            "lead_id": f"l_{str(uuid.uuid4())[:8]}",
            "pickup_zip": np.random.choice(ZIP_CODES),
            "pickup_city": CITY,
            "pickup_state": STATE,
            "total_price": value if has_total else "",
            "price_range_min": "" if has_total else np.round(value * 0.8, 2),
            "price_range_max": "" if has_total else value,
            "is_urgent": np.random.random() < 0.15,
            "preferred_date": (today + timedelta(days=int(np.random.randint(0, 14)))).isoformat(),
        })

    df = pd.DataFrame(data)
    df.to_csv(output_file, index=False)
    print(f"Generated {num_leads} leads and saved to '{output_file}'")
    print(f"Median lead value: ${np.median(values):.2f}")


if __name__ == "__main__":
    generate_mock_providers()
    generate_mock_leads()
