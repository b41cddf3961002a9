"""Billing repositories."""

from packages.billing.repositories.org_billing_repository import OrgBillingRepository

__all__ = [
    "OrgBillingRepository",
]
