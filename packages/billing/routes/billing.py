"""
Billing API routes.

Checkout endpoints used while an organization is being created.
"""

from fastapi import APIRouter, HTTPException, Request, status

from common.core.exceptions import BillingError, RemoteError
from common.core.otel_axiom_exporter import get_logger
from common.providers.rate_limiter.limiter import limiter
from packages.billing.services.billing_service import BillingService
from packages.billing.models.schemas.billing import (
    CheckoutRequest,
    CheckoutResponse,
    CheckoutStatusResponse,
    GateStatusResponse,
)

router = APIRouter()
logger = get_logger(__name__)


@router.get("/gate", response_model=GateStatusResponse)
async def get_gate_status():
    return GateStatusResponse(gate_enabled=BillingService().is_billing_gate_enabled())


@router.post("/checkout", response_model=CheckoutResponse)
@limiter.limit("30/minute")
async def create_checkout(request: Request, checkout_request: CheckoutRequest):
    """
    Create a payments checkout for an organization that does not exist yet.

    The returned pending linkage must be sent back on later creation calls.
    """
    try:
        initiation = await BillingService().initiate_checkout(
            checkout_request.org_name, checkout_request.pending
        )
    except BillingError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except RemoteError as e:
        logger.error(
            f"Checkout creation failed for org name {checkout_request.org_name}: {e}",
            extra={"org_name": checkout_request.org_name},
        )
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to generate payment checkout",
        )

    return CheckoutResponse(
        checkout_url=initiation.checkout_url,
        session_id=initiation.session_id,
        expires_at=initiation.expires_at,
        checkout_state=initiation.state,
        pending=initiation.pending,
    )


@router.get("/checkout/{session_id}", response_model=CheckoutStatusResponse)
async def get_checkout_status(session_id: str):
    """Poll a checkout session. An unreachable payments service reads as unpaid."""
    resolution = await BillingService().resume_checkout(session_id)
    return CheckoutStatusResponse(
        session_id=resolution.session_id,
        paid=resolution.paid,
        status=resolution.status,
        subscription_id=resolution.subscription_id,
        customer_id=resolution.customer_id,
        checkout_state=resolution.state,
    )
