"""
Domain models for checkout sessions and the creation-time billing flow.

The sidecar response models use the sidecar's JSON field names; JSON nulls
for identifiers are normalized to empty strings.
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict, field_validator

from packages.billing.models.domain.enums import (
    CheckoutState,
    SESSION_STATUS_COMPLETE,
    PAYMENT_STATUS_PAID,
)


def _none_to_empty(v):
    return "" if v is None else v


class CheckoutSession(BaseModel):
    """Checkout created by the payments sidecar for a new organization."""

    model_config = ConfigDict(extra="ignore")

    checkout_url: str = ""
    session_id: str = ""
    customer_id: str = ""
    subscription_id: str = ""
    expires_at: int = 0

    @field_validator(
        "checkout_url", "session_id", "customer_id", "subscription_id", mode="before"
    )
    @classmethod
    def none_to_empty(cls, v):
        return _none_to_empty(v)


class CheckoutStatus(BaseModel):
    """
    Status of a checkout session as reported by the sidecar.

    The sidecar may signal completion through either `status` or
    `payment_status`; both are kept and either one counts as paid. When the
    sidecar could not be asked, `status` carries a description of the failure
    and `error` is set.
    """

    model_config = ConfigDict(extra="ignore")

    session_id: str = ""
    status: str = ""
    payment_status: str = ""
    customer_id: str = ""
    subscription_id: str = ""
    error: Optional[str] = None

    @field_validator(
        "session_id",
        "status",
        "payment_status",
        "customer_id",
        "subscription_id",
        mode="before",
    )
    @classmethod
    def none_to_empty(cls, v):
        return _none_to_empty(v)

    @property
    def paid(self) -> bool:
        if self.error is not None:
            return False
        return (
            self.status == SESSION_STATUS_COMPLETE
            or self.payment_status == PAYMENT_STATUS_PAID
        )

    @classmethod
    def failed(cls, session_id: str, reason: str) -> "CheckoutStatus":
        return cls(session_id=session_id, status=f"error: {reason}", error=reason)


class PendingBillingLinkage(BaseModel):
    """
    Billing identifiers gathered before the organization exists.

    Carried by the caller between requests and handed back on creation;
    replaced by the durable billing record once the organization exists.
    """

    checkout_session_id: str = ""
    checkout_url: str = ""
    subscription_id: str = ""
    customer_id: str = ""

    @property
    def has_active_subscription(self) -> bool:
        return bool(self.subscription_id)


class CheckoutResolution(BaseModel):
    """Outcome of resuming a checkout session."""

    session_id: str
    paid: bool
    status: str
    subscription_id: str = ""
    customer_id: str = ""

    @property
    def state(self) -> CheckoutState:
        return CheckoutState.PAID if self.paid else CheckoutState.UNPAID


class CheckoutInitiation(BaseModel):
    """A freshly created checkout and the linkage that now tracks it."""

    checkout_url: str = ""
    session_id: str
    expires_at: int = 0
    state: CheckoutState = CheckoutState.PENDING_SESSION
    pending: PendingBillingLinkage


class CreationPageState(BaseModel):
    """Everything the organization-creation page needs about billing."""

    gate_enabled: bool
    checkout_state: CheckoutState = CheckoutState.NO_SESSION
    payment_completed: bool = False
    checkout_status: str = ""
    billing_token: str = ""
    checkout_url: str = ""
    has_active_subscription: bool = False
    active_subscription_id: str = ""
    org_name: str = ""
    pending: PendingBillingLinkage = PendingBillingLinkage()

    @property
    def can_create(self) -> bool:
        return (
            not self.gate_enabled
            or self.has_active_subscription
            or bool(self.billing_token)
        )
