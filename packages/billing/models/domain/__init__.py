"""Domain models for billing."""

from packages.billing.models.domain.enums import CheckoutState
from packages.billing.models.domain.org_billing import (
    OrgBilling,
    OrgBillingUpsertModel,
)
from packages.billing.models.domain.checkout import (
    CheckoutSession,
    CheckoutStatus,
    CheckoutResolution,
    CheckoutInitiation,
    PendingBillingLinkage,
    CreationPageState,
)
from packages.billing.models.domain.subscription import SubscriptionSummary
from packages.billing.models.domain.seats import SeatSet
from packages.billing.models.domain.summary import BillingSummary

__all__ = [
    # Enums
    "CheckoutState",
    # Billing record
    "OrgBilling",
    "OrgBillingUpsertModel",
    # Checkout
    "CheckoutSession",
    "CheckoutStatus",
    "CheckoutResolution",
    "CheckoutInitiation",
    "PendingBillingLinkage",
    "CreationPageState",
    # Remote subscription
    "SubscriptionSummary",
    # Seats
    "SeatSet",
    # Settings page
    "BillingSummary",
]
