"""
Billing facade used by organization routes and services.
"""

from typing import Optional

from common.core.exceptions import AppException
from common.core.otel_axiom_exporter import trace_span, get_logger
from common.db.context import readonly
from packages.billing.models.domain.checkout import (
    CheckoutInitiation,
    CheckoutResolution,
    PendingBillingLinkage,
)
from packages.billing.models.domain.org_billing import OrgBilling
from packages.billing.models.domain.summary import BillingSummary
from packages.billing.services.checkout_service import CheckoutService
from packages.billing.services.portal_service import PortalService
from packages.billing.services.seat_service import SeatService
from packages.billing.services.seat_sync_service import SeatSyncService

logger = get_logger(__name__)


class BillingService:
    """Entry point for billing operations on organizations."""

    def __init__(self):
        self.checkout_service = CheckoutService()
        self.seat_service = SeatService()
        self.seat_sync_service = SeatSyncService()
        self.portal_service = PortalService()

    def is_billing_gate_enabled(self) -> bool:
        return self.checkout_service.is_gate_enabled()

    async def initiate_checkout(
        self, org_name: str, pending: Optional[PendingBillingLinkage] = None
    ) -> CheckoutInitiation:
        return await self.checkout_service.initiate_checkout(org_name, pending)

    async def resume_checkout(self, session_id: str) -> CheckoutResolution:
        return await self.checkout_service.resume_checkout(session_id)

    async def link_billing(
        self,
        org_id: int,
        subscription_id: str = "",
        customer_id: str = "",
        checkout_session_id: str = "",
    ) -> Optional[OrgBilling]:
        return await self.checkout_service.link_billing(
            org_id, subscription_id, customer_id, checkout_session_id
        )

    async def sync_seats(self, org_id: int) -> int:
        """Returns the seat count the payments service accepted."""
        saved = await self.seat_sync_service.sync_seats(org_id)
        return saved.last_seat_count

    async def open_portal(self, org_id: int) -> str:
        return await self.portal_service.open_portal(org_id)

    @trace_span
    @readonly
    async def get_billing_summary(self, org_id: int) -> BillingSummary:
        """
        Billing state for the settings page. Never raises for storage,
        lookup or remote failures; the affected fields stay empty.
        """
        summary = BillingSummary(gate_enabled=self.is_billing_gate_enabled())
        if not summary.gate_enabled:
            return summary

        try:
            record = await self.checkout_service.org_billing_repo.get(org_id)
        except AppException as e:
            logger.warning(
                f"Could not load billing record for org {org_id}: {e}",
                extra={"org_id": org_id},
            )
            return summary
        if record is None:
            return summary

        summary.billing = record
        summary.customer_id = record.customer_id

        try:
            seats = await self.seat_service.compute_write_member_ids(org_id)
            summary.seat_count = seats.count
        except AppException as e:
            logger.warning(
                f"Could not compute seats for org {org_id}: {e}",
                extra={"org_id": org_id},
            )

        if record.subscription_id:
            try:
                subscription = await self.checkout_service.payment.get_subscription(
                    record.subscription_id
                )
                summary.subscription = subscription
                if not summary.customer_id:
                    summary.customer_id = subscription.customer_id
            except AppException as e:
                logger.warning(
                    f"Could not fetch subscription {record.subscription_id}: {e}",
                    extra={
                        "org_id": org_id,
                        "subscription_id": record.subscription_id,
                    },
                )

        return summary
