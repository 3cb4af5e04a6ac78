"""
Leads domain package.

Public API:
- Domain models: Lead, LeadItem, LeadStatus, Job, JobStatus
- Pricing: calculate_lead_price
"""
from .models import Lead, LeadItem, LeadStatus, Job, JobStatus
from .pricing import calculate_lead_price

__all__ = [
    "Lead",
    "LeadItem",
    "LeadStatus",
    "Job",
    "JobStatus",
    "calculate_lead_price",
]
