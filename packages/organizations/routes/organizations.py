"""
Organization API routes.

Creation is gated on payment when the billing gate is enabled.
"""

from fastapi import APIRouter, HTTPException, status

from common.core.exceptions import (
    GateBlocked,
    NotFoundError,
    OrganizationNameTakenError,
)
from common.core.otel_axiom_exporter import get_logger
from packages.billing.models.schemas.billing import OrgBillingResponse
from packages.billing.services.checkout_service import CheckoutService
from packages.organizations.models.domain.organization import OrganizationCreateModel
from packages.organizations.models.schemas.organization import (
    CreationStateRequest,
    CreationStateResponse,
    OrganizationCreateRequest,
    OrganizationResponse,
    PaymentRequiredDetail,
)
from packages.organizations.services.organization_service import OrganizationService

router = APIRouter()
logger = get_logger(__name__)


@router.post("/creation-state", response_model=CreationStateResponse)
async def get_creation_state(request: CreationStateRequest):
    """
    Billing state of the creation page.

    Polls the checkout when a session ID is known; a paid session yields the
    billing token for the create call.
    """
    state = await CheckoutService().load_creation_state(
        checkout_session_id=request.checkout_session_id,
        org_name=request.org_name,
        pending=request.pending,
    )
    return CreationStateResponse(
        **state.model_dump(exclude={"pending"}),
        can_create=state.can_create,
        pending=state.pending,
    )


@router.post(
    "", response_model=OrganizationResponse, status_code=status.HTTP_201_CREATED
)
async def create_organization(request: OrganizationCreateRequest):
    create_model = OrganizationCreateModel(
        name=request.org_name,
        visibility=request.visibility,
        repo_admin_change_team_access=request.repo_admin_change_team_access,
    )
    try:
        created = await OrganizationService().create_organization(
            create_model,
            owner_user_id=request.owner_user_id,
            billing_token=request.billing_token,
            pending=request.pending,
        )
    except GateBlocked as e:
        detail = PaymentRequiredDetail(
            message=str(e),
            org_name=request.org_name,
            visibility=request.visibility,
            repo_admin_change_team_access=request.repo_admin_change_team_access,
            billing_token=request.billing_token,
        )
        raise HTTPException(
            status_code=status.HTTP_402_PAYMENT_REQUIRED,
            detail=detail.model_dump(mode="json"),
        )
    except OrganizationNameTakenError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    org = created.organization
    return OrganizationResponse(
        id=org.id,
        name=org.name,
        visibility=org.visibility,
        repo_admin_change_team_access=org.repo_admin_change_team_access,
        owner_team_id=created.owner_team.id,
        created_at=org.created_at,
        billing=(
            OrgBillingResponse.model_validate(created.billing.model_dump())
            if created.billing
            else None
        ),
    )
