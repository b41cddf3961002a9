"""
Organization billing routes: settings summary, seat sync and portal.
"""

from fastapi import APIRouter, HTTPException, status

from common.core.exceptions import (
    BillingError,
    NotFoundError,
    RemoteError,
    StorageError,
    TeamLookupError,
)
from common.core.otel_axiom_exporter import get_logger
from packages.billing.services.billing_service import BillingService
from packages.billing.models.schemas.billing import (
    BillingSummaryResponse,
    PortalSessionResponse,
    SyncSeatsResponse,
)

router = APIRouter()
logger = get_logger(__name__)


@router.get("/{org_id}/billing", response_model=BillingSummaryResponse)
async def get_billing_summary(org_id: int):
    summary = await BillingService().get_billing_summary(org_id)
    return BillingSummaryResponse.model_validate(summary.model_dump())


@router.post("/{org_id}/billing/sync-seats", response_model=SyncSeatsResponse)
async def sync_seats(org_id: int):
    """Push the current seat count to the organization's subscription."""
    try:
        seat_count = await BillingService().sync_seats(org_id)
    except BillingError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except TeamLookupError as e:
        logger.error(f"Seat computation failed for org {org_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to compute seat count",
        )
    except RemoteError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Failed to sync seats: {e}",
        )
    except StorageError as e:
        logger.error(f"Storing synced seats failed for org {org_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to store synced seat count",
        )

    return SyncSeatsResponse(
        org_id=org_id,
        seat_count=seat_count,
        message=f"Synced seats to {seat_count}",
    )


@router.post("/{org_id}/billing/portal", response_model=PortalSessionResponse)
async def open_billing_portal(org_id: int):
    try:
        portal_url = await BillingService().open_portal(org_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except BillingError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except RemoteError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Failed to generate billing portal: {e}",
        )
    return PortalSessionResponse(portal_url=portal_url)
