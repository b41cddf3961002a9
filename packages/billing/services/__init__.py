"""Billing services."""

from packages.billing.services.billing_service import BillingService
from packages.billing.services.checkout_service import CheckoutService
from packages.billing.services.portal_service import PortalService
from packages.billing.services.seat_service import SeatService
from packages.billing.services.seat_sync_service import SeatSyncService

__all__ = [
    "BillingService",
    "CheckoutService",
    "PortalService",
    "SeatService",
    "SeatSyncService",
]
