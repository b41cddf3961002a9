"""Billing API routes."""

from packages.billing.routes import billing, org_billing

__all__ = ["billing", "org_billing"]
