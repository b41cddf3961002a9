"""
Service reconciling checkout sessions with organization creation.

A creation attempt moves through no_session -> pending_session -> paid or
unpaid. The gate decision is made from the pending linkage the caller carries
and the billing token (the paid checkout session ID) submitted with the
create request.
"""

from typing import Optional
from urllib.parse import quote

from common.core.config import settings
from common.core.constants import BILLING_TOKEN_USED_MESSAGE, PAYMENT_REQUIRED_MESSAGE
from common.core.exceptions import AppException, BillingError, GateBlocked
from common.core.otel_axiom_exporter import trace_span, get_logger, log_span_event
from packages.billing.models.domain.checkout import (
    CheckoutInitiation,
    CheckoutResolution,
    CreationPageState,
    PendingBillingLinkage,
)
from packages.billing.models.domain.enums import CheckoutState
from packages.billing.models.domain.org_billing import OrgBilling, OrgBillingUpsertModel
from packages.billing.providers.payment.factory import get_payment_provider
from packages.billing.repositories.org_billing_repository import (
    OrgBillingRepository,
)

logger = get_logger(__name__)

# Placeholder the payments service substitutes with the real session ID
SESSION_ID_PLACEHOLDER = "{CHECKOUT_SESSION_ID}"


def creation_page_url(org_name: str = "") -> str:
    url = f"{settings.app_url}org/create"
    if org_name:
        url += f"?org_name={quote(org_name, safe='')}"
    return url


class CheckoutService:
    """Service for checkout sessions and the creation-time payment gate."""

    def __init__(self):
        self.org_billing_repo = OrgBillingRepository()
        self.payment = get_payment_provider()

    def is_gate_enabled(self) -> bool:
        """Whether organization creation requires payment. Read per call."""
        return settings.payments_enabled

    @trace_span
    async def initiate_checkout(
        self, org_name: str, pending: Optional[PendingBillingLinkage] = None
    ) -> CheckoutInitiation:
        """
        Create a checkout for an organization that does not exist yet.

        The returned linkage tracks the new session; a subscription ID is only
        adopted once the session resolves as paid.

        Raises:
            BillingError: the payment gate is disabled
            RemoteError: the payments service failed to create the checkout
        """
        if not self.is_gate_enabled():
            raise BillingError("Payments are not enabled")

        success_url = (
            f"{settings.app_url}org/create?checkout_session_id={SESSION_ID_PLACEHOLDER}"
            f"&org_name={quote(org_name, safe='')}"
        )
        checkout = await self.payment.create_checkout(
            org_name=org_name,
            success_url=success_url,
            cancel_url=creation_page_url(org_name),
        )

        pending = pending or PendingBillingLinkage()
        updated = pending.model_copy(
            update={
                "checkout_session_id": checkout.session_id,
                "checkout_url": checkout.checkout_url,
                "customer_id": checkout.customer_id or pending.customer_id,
            }
        )

        logger.info(
            f"Initiated checkout {checkout.session_id} for org name {org_name}",
            extra={"org_name": org_name, "session_id": checkout.session_id},
        )
        return CheckoutInitiation(
            checkout_url=checkout.checkout_url,
            session_id=checkout.session_id,
            expires_at=checkout.expires_at,
            pending=updated,
        )

    @trace_span
    async def resume_checkout(self, session_id: str) -> CheckoutResolution:
        """
        Poll a checkout session. Never raises for remote failures.

        An unreachable payments service resolves as unpaid with a
        diagnostic status.
        """
        if not session_id:
            return CheckoutResolution(
                session_id="", paid=False, status="no checkout session"
            )

        status = await self.payment.get_checkout_status(session_id)
        resolution = CheckoutResolution(
            session_id=session_id,
            paid=status.paid,
            status=status.status,
            subscription_id=status.subscription_id,
            customer_id=status.customer_id,
        )
        if resolution.paid:
            log_span_event(
                f"Checkout {session_id} is paid",
                {"session_id": session_id, "subscription_id": resolution.subscription_id},
            )
        return resolution

    @staticmethod
    def adopt_resolution(
        pending: PendingBillingLinkage, resolution: CheckoutResolution
    ) -> PendingBillingLinkage:
        """Linkage after a resolution; only a paid one changes billing IDs."""
        update = {"checkout_session_id": resolution.session_id}
        if resolution.paid:
            update["subscription_id"] = resolution.subscription_id
            if resolution.customer_id:
                update["customer_id"] = resolution.customer_id
        return pending.model_copy(update=update)

    @trace_span
    async def load_creation_state(
        self,
        checkout_session_id: str = "",
        org_name: str = "",
        pending: Optional[PendingBillingLinkage] = None,
    ) -> CreationPageState:
        """
        Billing state for the organization-creation page.

        An explicit session ID (a returning redirect) wins over the pending
        one. Status is polled only when a session ID is known.
        """
        pending = pending or PendingBillingLinkage()
        state = CreationPageState(
            gate_enabled=self.is_gate_enabled(),
            checkout_url=pending.checkout_url,
            has_active_subscription=pending.has_active_subscription,
            active_subscription_id=pending.subscription_id,
            org_name=org_name,
            pending=pending,
        )

        session_id = checkout_session_id or pending.checkout_session_id
        if not session_id:
            return state

        resolution = await self.resume_checkout(session_id)
        pending = self.adopt_resolution(pending, resolution)
        state.checkout_state = resolution.state
        state.checkout_status = resolution.status
        state.pending = pending
        if resolution.paid:
            state.payment_completed = True
            state.billing_token = session_id
            state.has_active_subscription = True
            state.active_subscription_id = resolution.subscription_id
        return state

    @trace_span
    async def ensure_creation_allowed(
        self,
        billing_token: str = "",
        pending: Optional[PendingBillingLinkage] = None,
    ) -> Optional[CheckoutResolution]:
        """
        Gate check made right before an organization is created.

        Passes when the gate is disabled, the pending linkage already holds a
        subscription, or a billing token accompanies the request. With
        payments_verify_billing_token set, only a session the payments
        service reports as paid passes, and its resolution is returned.

        A checkout session pays for one organization: a session already
        linked to an organization never passes again.

        Raises:
            GateBlocked: payment is required and absent, or already used
        """
        if not self.is_gate_enabled():
            return None

        pending = pending or PendingBillingLinkage()
        session_id = billing_token or pending.checkout_session_id

        linked = await self.org_billing_repo.get_by_checkout_session_id(session_id)
        if linked is not None:
            logger.info(
                f"Billing token {session_id} already paid for org {linked.org_id}",
                extra={"session_id": session_id, "org_id": linked.org_id},
            )
            raise GateBlocked(BILLING_TOKEN_USED_MESSAGE)

        if not settings.payments_verify_billing_token:
            if pending.has_active_subscription or billing_token:
                return None
            raise GateBlocked(PAYMENT_REQUIRED_MESSAGE)

        if session_id:
            resolution = await self.resume_checkout(session_id)
            if resolution.paid:
                return resolution
            logger.info(
                f"Billing token {session_id} is not a paid checkout: {resolution.status}",
                extra={"session_id": session_id},
            )
        raise GateBlocked(PAYMENT_REQUIRED_MESSAGE)

    @trace_span
    async def link_billing(
        self,
        org_id: int,
        subscription_id: str = "",
        customer_id: str = "",
        checkout_session_id: str = "",
    ) -> Optional[OrgBilling]:
        """
        Associate a freshly created organization with its billing IDs.

        Performs one upsert when a subscription or session ID is known. An
        existing record keeps its seat sync fields and any ID not given here.
        Best-effort: failures are logged and None is returned so the
        organization creation still succeeds.
        """
        if not subscription_id and not checkout_session_id:
            return None

        try:
            existing = await self.org_billing_repo.get(org_id)
            if existing is None:
                record = OrgBillingUpsertModel(
                    org_id=org_id,
                    subscription_id=subscription_id,
                    customer_id=customer_id,
                    checkout_session_id=checkout_session_id,
                )
            else:
                record = existing.to_upsert(
                    subscription_id=subscription_id or existing.subscription_id,
                    customer_id=customer_id or existing.customer_id,
                    checkout_session_id=checkout_session_id
                    or existing.checkout_session_id,
                )
            saved = await self.org_billing_repo.upsert(record)
        except AppException as e:
            logger.error(
                f"Failed to link billing for org {org_id}: {e}",
                extra={
                    "org_id": org_id,
                    "subscription_id": subscription_id,
                    "session_id": checkout_session_id,
                },
            )
            return None

        logger.info(
            f"Linked org {org_id} to billing",
            extra={
                "org_id": org_id,
                "subscription_id": subscription_id,
                "session_id": checkout_session_id,
            },
        )
        return saved
