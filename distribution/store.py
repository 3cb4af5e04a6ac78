"""
Purpose: The store contract the distribution core talks to, plus an
in-memory implementation of it.
What it does:
- MarketplaceStore documents every read/write the core needs:
  lead lookup/update, provider lookup with today's job count,
  distribution/job creation, credit deduction and a transaction scope.
- InMemoryMarketplaceStore keeps everything in dicts. Reads hand out
  copies and writes store copies, the way a database round-trip would,
  so a rolled-back transaction never leaks into objects callers hold.

Rule: Store owns persistence and uniqueness, the core owns decisions.
"""

from __future__ import annotations

import copy
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Dict, Iterator, List, Optional, Protocol, Tuple

from leads.models import Job, Lead
from providers.models import Provider, ProviderStatus
from providers.selection import matching_service_areas
from .errors import DuplicateDistributionError
from .models import Distribution


class MarketplaceStore(Protocol):
    def transaction(self): ...

    def get_lead(self, lead_id: str) -> Optional[Lead]: ...

    def save_lead(self, lead: Lead) -> None: ...

    def get_provider(self, provider_id: str, today: Optional[date] = None) -> Optional[Provider]: ...

    def find_providers_for(self, lead: Lead, today: Optional[date] = None) -> List[Provider]: ...

    def today_job_count(self, provider_id: str, today: Optional[date] = None) -> int: ...

    def deduct_credits(self, provider_id: str, amount: int) -> None: ...

    def create_distribution(self, distribution: Distribution) -> Distribution: ...

    def save_distribution(self, distribution: Distribution) -> None: ...

    def get_distribution(self, distribution_id: str) -> Optional[Distribution]: ...

    def distributions_for_lead(self, lead_id: str) -> List[Distribution]: ...

    def distributions_for_provider(self, provider_id: str) -> List[Distribution]: ...

    def create_job(self, job: Job) -> Job: ...

    def jobs_for_lead(self, lead_id: str) -> List[Job]: ...


@dataclass
class InMemoryMarketplaceStore:
    """
    In-memory store. Transactions are serialized with a re-entrant lock;
    the outermost one snapshots all state and restores it on any exception.
    """
    _leads: Dict[str, Lead] = field(default_factory=dict)
    _providers: Dict[str, Provider] = field(default_factory=dict)
    _distributions: Dict[str, Distribution] = field(default_factory=dict)
    _jobs: Dict[str, Job] = field(default_factory=dict)

    # (lead_id, provider_id) -> distribution id, enforces one offer per pair
    _pairs: Dict[Tuple[str, str], str] = field(default_factory=dict)

    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)
    _depth: int = field(default=0, repr=False)

    # --- Seeding ---

    def add_lead(self, lead: Lead) -> None:
        self._leads[lead.id] = copy.deepcopy(lead)

    def add_provider(self, provider: Provider) -> None:
        self._providers[provider.id] = provider

    # --- Transactions ---

    @contextmanager
    def transaction(self) -> Iterator[InMemoryMarketplaceStore]:
        with self._lock:
            if self._depth > 0:
                # Nested scopes join the outer one
                self._depth += 1
                try:
                    yield self
                finally:
                    self._depth -= 1
                return

            snapshot = copy.deepcopy((self._leads, self._providers, self._distributions, self._jobs, self._pairs))
            self._depth = 1
            try:
                yield self
            except BaseException:
                self._leads, self._providers, self._distributions, self._jobs, self._pairs = snapshot
                raise
            finally:
                self._depth = 0

    # --- Leads ---

    def get_lead(self, lead_id: str) -> Optional[Lead]:
        lead = self._leads.get(lead_id)
        return copy.deepcopy(lead) if lead else None

    def save_lead(self, lead: Lead) -> None:
        if lead.id not in self._leads:
            raise KeyError(f"Unknown lead {lead.id}")
        self._leads[lead.id] = copy.deepcopy(lead)

    # --- Providers ---

    def today_job_count(self, provider_id: str, today: Optional[date] = None) -> int:
        today = today or date.today()
        return sum(
            1 for job in self._jobs.values()
            if job.provider_id == provider_id and job.scheduled_date == today
        )

    def get_provider(self, provider_id: str, today: Optional[date] = None) -> Optional[Provider]:
        provider = self._providers.get(provider_id)
        if provider is None:
            return None
        return replace(provider, jobs_today=self.today_job_count(provider_id, today))

    def find_providers_for(self, lead: Lead, today: Optional[date] = None) -> List[Provider]:
        """
        Active providers serving the lead's location, with today's job count filled in.
        Value range and capacity are left to the eligibility filter.
        """
        return [
            replace(provider, jobs_today=self.today_job_count(provider.id, today))
            for provider in self._providers.values()
            if provider.status == ProviderStatus.ACTIVE and matching_service_areas(provider, lead)
        ]

    def deduct_credits(self, provider_id: str, amount: int) -> None:
        with self._lock:
            provider = self._providers.get(provider_id)
            if provider is None:
                raise KeyError(f"Unknown provider {provider_id}")
            self._providers[provider_id] = replace(provider, lead_credits=max(provider.lead_credits - amount, 0))

    # --- Distributions ---

    def create_distribution(self, distribution: Distribution) -> Distribution:
        with self._lock:
            if distribution.lead_id not in self._leads:
                raise KeyError(f"Unknown lead {distribution.lead_id}")
            if distribution.provider_id not in self._providers:
                raise KeyError(f"Unknown provider {distribution.provider_id}")

            pair = (distribution.lead_id, distribution.provider_id)
            if pair in self._pairs:
                raise DuplicateDistributionError(*pair)

            self._pairs[pair] = distribution.id
            self._distributions[distribution.id] = copy.deepcopy(distribution)
            return distribution

    def save_distribution(self, distribution: Distribution) -> None:
        if distribution.id not in self._distributions:
            raise KeyError(f"Unknown distribution {distribution.id}")
        self._distributions[distribution.id] = copy.deepcopy(distribution)

    def get_distribution(self, distribution_id: str) -> Optional[Distribution]:
        distribution = self._distributions.get(distribution_id)
        return copy.deepcopy(distribution) if distribution else None

    def distributions_for_lead(self, lead_id: str) -> List[Distribution]:
        return [copy.deepcopy(d) for d in self._distributions.values() if d.lead_id == lead_id]

    def distributions_for_provider(self, provider_id: str) -> List[Distribution]:
        return [copy.deepcopy(d) for d in self._distributions.values() if d.provider_id == provider_id]

    # --- Jobs ---

    def create_job(self, job: Job) -> Job:
        with self._lock:
            self._jobs[job.job_id] = copy.deepcopy(job)
            return job

    def jobs_for_lead(self, lead_id: str) -> List[Job]:
        return [copy.deepcopy(job) for job in self._jobs.values() if job.lead_id == lead_id]
