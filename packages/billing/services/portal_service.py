"""
Service opening the payments customer portal for an organization.
"""

from urllib.parse import quote

from common.core.config import settings
from common.core.constants import NO_BILLING_CUSTOMER_MESSAGE
from common.core.exceptions import AppException, BillingError, NotFoundError
from common.core.otel_axiom_exporter import trace_span, get_logger
from packages.billing.models.domain.org_billing import OrgBilling
from packages.billing.providers.payment.factory import get_payment_provider
from packages.billing.repositories.org_billing_repository import (
    OrgBillingRepository,
)
from packages.organizations.repositories.organization_repository import (
    OrganizationRepository,
)

logger = get_logger(__name__)


def settings_page_url(org_name: str) -> str:
    return f"{settings.app_url}org/{quote(org_name, safe='')}/settings"


class PortalService:
    """Service for customer portal sessions."""

    def __init__(self):
        self.org_billing_repo = OrgBillingRepository()
        self.org_repo = OrganizationRepository()
        self.payment = get_payment_provider()

    @trace_span
    async def open_portal(self, org_id: int) -> str:
        """
        Portal URL for an organization's billing customer.

        When the record has no customer but does have a subscription, the
        customer is taken from the remote subscription and stored.

        Raises:
            NotFoundError: unknown organization
            BillingError: no billing customer could be determined; no portal
                request is made
            RemoteError: the payments service failed to create the session
        """
        org = await self.org_repo.get(org_id)
        if org is None:
            raise NotFoundError(f"Organization {org_id} not found")

        record = await self.org_billing_repo.get(org_id)
        if record is None:
            raise BillingError(NO_BILLING_CUSTOMER_MESSAGE)

        customer_id = record.customer_id
        if not customer_id and record.subscription_id:
            customer_id = await self._recover_customer(record)
        if not customer_id:
            raise BillingError(NO_BILLING_CUSTOMER_MESSAGE)

        portal_url = await self.payment.create_portal_session(
            customer_id=customer_id,
            return_url=settings_page_url(org.name),
            subscription_id=record.subscription_id or None,
        )
        logger.info(
            f"Opened billing portal for org {org_id}",
            extra={"org_id": org_id, "customer_id": customer_id},
        )
        return portal_url

    async def _recover_customer(self, record: OrgBilling) -> str:
        """Customer of the record's subscription, or "" when unavailable."""
        try:
            subscription = await self.payment.get_subscription(record.subscription_id)
        except AppException as e:
            logger.warning(
                f"Could not fetch subscription {record.subscription_id}: {e}",
                extra={
                    "org_id": record.org_id,
                    "subscription_id": record.subscription_id,
                },
            )
            return ""

        if not subscription.customer_id:
            return ""

        try:
            await self.org_billing_repo.upsert(
                record.to_upsert(customer_id=subscription.customer_id)
            )
        except AppException as e:
            logger.warning(
                f"Could not store recovered customer for org {record.org_id}: {e}",
                extra={"org_id": record.org_id},
            )
        return subscription.customer_id
