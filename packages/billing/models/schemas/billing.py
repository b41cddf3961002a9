"""
API schemas for billing operations.

Request and response models for billing endpoints.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from packages.billing.models.domain.checkout import PendingBillingLinkage
from packages.billing.models.domain.enums import CheckoutState


# ============================================================================
# Gate Schemas
# ============================================================================


class GateStatusResponse(BaseModel):
    gate_enabled: bool = Field(
        ..., description="Whether organization creation requires payment"
    )


# ============================================================================
# Checkout Schemas
# ============================================================================


class CheckoutRequest(BaseModel):
    """Request to create a checkout for a new organization."""

    org_name: str = Field(..., min_length=1, max_length=255)
    pending: Optional[PendingBillingLinkage] = Field(
        default=None, description="Linkage returned by earlier billing calls"
    )


class CheckoutResponse(BaseModel):
    checkout_url: str = Field(..., description="Payments checkout URL")
    session_id: str
    expires_at: int = 0
    checkout_state: CheckoutState
    pending: PendingBillingLinkage


class CheckoutStatusResponse(BaseModel):
    """Resolution of a checkout session. `status` carries diagnostics."""

    session_id: str
    paid: bool
    status: str
    subscription_id: str = ""
    customer_id: str = ""
    checkout_state: CheckoutState


# ============================================================================
# Organization Billing Schemas
# ============================================================================


class OrgBillingResponse(BaseModel):
    org_id: int
    subscription_id: str = ""
    customer_id: str = ""
    checkout_session_id: str = ""
    last_seat_count: int = 0
    last_sync_time: Optional[datetime] = None


class SubscriptionResponse(BaseModel):
    id: str
    status: str = ""
    quantity: int = 0
    customer_id: str = ""
    current_period_end: int = 0


class BillingSummaryResponse(BaseModel):
    gate_enabled: bool
    billing: Optional[OrgBillingResponse] = None
    seat_count: Optional[int] = Field(
        default=None, description="Seats by current membership"
    )
    subscription: Optional[SubscriptionResponse] = None
    customer_id: str = ""
    can_open_portal: bool = False


class SyncSeatsResponse(BaseModel):
    org_id: int
    seat_count: int
    message: str


class PortalSessionResponse(BaseModel):
    portal_url: str = Field(..., description="Payments customer portal URL")
