"""
Purpose: Central configuration for lead distribution.
What it does:

Stores all tunable thresholds/caps for fanning a lead out:

SMALL_JOB_THRESHOLD = 500   -> 2 recipients below it
MEDIUM_JOB_THRESHOLD = 1500 -> 3 recipients below it, 4 at or above
CREDITS_PER_DISTRIBUTION = 1

Values can be overridden from the environment (.env supported).

Rule: No logic here, only parameters, so bands can be tuned without touching the engine.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv


@dataclass(frozen=True)
class DistributionPolicy:
    """
    Central configuration for fan-out distribution.
    """

    # --- Recipient count bands ---
    # Estimated value strictly below the threshold falls in that band.
    small_job_threshold: float = 500
    medium_job_threshold: float = 1500

    small_job_recipients: int = 2
    medium_job_recipients: int = 3
    large_job_recipients: int = 4

    # --- Credits ---
    # Units deducted from a provider for every lead sent to them.
    credits_per_distribution: int = 1

    # Providers with no credits left are skipped on the fan-out path.
    require_credits_for_fanout: bool = True

    def validate(self) -> None:
        """
        Basic sanity checks.
        """
        if self.small_job_threshold <= 0:
            raise ValueError("small_job_threshold must be > 0")

        if self.medium_job_threshold <= self.small_job_threshold:
            raise ValueError("medium_job_threshold must be > small_job_threshold")

        for recipients in (self.small_job_recipients, self.medium_job_recipients, self.large_job_recipients):
            if recipients < 1:
                raise ValueError("recipient counts must be >= 1")

        if self.credits_per_distribution < 0:
            raise ValueError("credits_per_distribution must be >= 0")


def default_distribution_policy() -> DistributionPolicy:
    """
    Convenience factory for the default policy.
    """
    p = DistributionPolicy()
    p.validate()
    return p


def policy_from_env() -> DistributionPolicy:
    """
    Build a policy from LEADS_* environment variables.
    Example in .env:
    LEADS_SMALL_JOB_THRESHOLD=400
    LEADS_LARGE_JOB_RECIPIENTS=5
    """
    load_dotenv()
    defaults = DistributionPolicy()

    p = DistributionPolicy(
        small_job_threshold=float(os.getenv("LEADS_SMALL_JOB_THRESHOLD", defaults.small_job_threshold)),
        medium_job_threshold=float(os.getenv("LEADS_MEDIUM_JOB_THRESHOLD", defaults.medium_job_threshold)),
        small_job_recipients=int(os.getenv("LEADS_SMALL_JOB_RECIPIENTS", defaults.small_job_recipients)),
        medium_job_recipients=int(os.getenv("LEADS_MEDIUM_JOB_RECIPIENTS", defaults.medium_job_recipients)),
        large_job_recipients=int(os.getenv("LEADS_LARGE_JOB_RECIPIENTS", defaults.large_job_recipients)),
        credits_per_distribution=int(os.getenv("LEADS_CREDITS_PER_DISTRIBUTION", defaults.credits_per_distribution)),
    )
    p.validate()
    return p
