"""Database models for billing."""

from packages.billing.models.database.org_billing import OrgBillingEntity

__all__ = [
    "OrgBillingEntity",
]
