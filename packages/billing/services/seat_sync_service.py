"""
Service pushing seat counts to the payments service.
"""

from datetime import datetime, timezone

from common.core.constants import NO_SUBSCRIPTION_TO_SYNC_MESSAGE
from common.core.exceptions import BillingError
from common.core.otel_axiom_exporter import trace_span, get_logger
from packages.billing.models.domain.org_billing import OrgBilling
from packages.billing.providers.payment.factory import get_payment_provider
from packages.billing.repositories.org_billing_repository import (
    OrgBillingRepository,
)
from packages.billing.services.seat_service import SeatService

logger = get_logger(__name__)


class SeatSyncService:
    """
    Keeps the subscription quantity in line with current membership.

    The stored last_seat_count only ever holds a count the payments service
    accepted; concurrent syncs for one organization are last-writer-wins.
    """

    def __init__(self):
        self.org_billing_repo = OrgBillingRepository()
        self.seat_service = SeatService()
        self.payment = get_payment_provider()

    @trace_span
    async def sync_seats(self, org_id: int) -> OrgBilling:
        """
        Recompute seats and push them to the subscription.

        Returns:
            The billing record carrying the accepted seat count

        Raises:
            BillingError: no subscription to sync against
            TeamLookupError: seats could not be computed
            RemoteError: the payments service rejected the quantity; the
                record is left untouched
            StorageError: the accepted count could not be stored
        """
        record = await self.org_billing_repo.get(org_id)
        if record is None or not record.has_subscription():
            raise BillingError(NO_SUBSCRIPTION_TO_SYNC_MESSAGE)

        seats = await self.seat_service.compute_write_member_ids(org_id)

        await self.payment.set_subscription_quantity(
            record.subscription_id, seats.count
        )

        saved = await self.org_billing_repo.upsert(
            record.to_upsert(
                last_seat_count=seats.count,
                last_sync_time=datetime.now(timezone.utc),
            )
        )

        logger.info(
            f"Synced seats to {seats.count} for org {org_id}",
            extra={
                "org_id": org_id,
                "subscription_id": record.subscription_id,
                "seat_count": seats.count,
            },
        )
        return saved
