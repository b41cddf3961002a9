"""
Billing enums for checkout reconciliation.
"""

from enum import Enum


class CheckoutState(str, Enum):
    """
    Where an organization-creation attempt stands with its checkout.

    Flow: no_session -> pending_session -> paid | unpaid
    """

    NO_SESSION = "no_session"  # Nothing to reconcile yet
    PENDING_SESSION = "pending_session"  # Checkout created, payment not confirmed
    PAID = "paid"  # Sidecar reported the session as paid
    UNPAID = "unpaid"  # Still open, expired, or the sidecar was unreachable


# Completion signals emitted by the payments sidecar. Either one marks a
# session as paid.
SESSION_STATUS_COMPLETE = "complete"
PAYMENT_STATUS_PAID = "paid"
