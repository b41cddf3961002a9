"""
API schemas for organization creation.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from packages.billing.models.domain.checkout import PendingBillingLinkage
from packages.billing.models.domain.enums import CheckoutState
from packages.billing.models.schemas.billing import OrgBillingResponse
from packages.organizations.models.domain.enums import OrganizationVisibility


class CreationStateRequest(BaseModel):
    """Billing state lookup for the creation page, e.g. on a checkout redirect."""

    checkout_session_id: str = ""
    org_name: str = ""
    pending: Optional[PendingBillingLinkage] = None


class CreationStateResponse(BaseModel):
    gate_enabled: bool
    checkout_state: CheckoutState
    payment_completed: bool
    checkout_status: str = ""
    billing_token: str = Field(
        default="", description="Paid checkout session ID to submit on creation"
    )
    checkout_url: str = ""
    has_active_subscription: bool
    active_subscription_id: str = ""
    org_name: str = ""
    can_create: bool
    pending: PendingBillingLinkage


class OrganizationCreateRequest(BaseModel):
    org_name: str = Field(..., min_length=1, max_length=255)
    visibility: OrganizationVisibility = OrganizationVisibility.PUBLIC
    repo_admin_change_team_access: bool = False
    owner_user_id: int
    billing_token: str = ""
    pending: Optional[PendingBillingLinkage] = None


class OrganizationResponse(BaseModel):
    id: int
    name: str
    visibility: OrganizationVisibility
    repo_admin_change_team_access: bool
    owner_team_id: int
    created_at: datetime
    billing: Optional[OrgBillingResponse] = None


class PaymentRequiredDetail(BaseModel):
    """Body of a gate-blocked creation; echoes the submitted form fields."""

    message: str
    org_name: str
    visibility: OrganizationVisibility
    repo_admin_change_team_access: bool
    billing_token: str = ""
