"""
Payments sidecar implementation of payment provider.

All requests are JSON over HTTP against settings.payments_sidecar_url.
Identifiers embedded in URL paths are percent-escaped.
"""

from typing import Any, Optional
from urllib.parse import quote

import httpx
from pydantic import ValidationError as PydanticValidationError

from common.core.config import settings
from common.core.exceptions import RemoteError
from common.core.otel_axiom_exporter import trace_span, get_logger
from packages.billing.models.domain.checkout import CheckoutSession, CheckoutStatus
from packages.billing.models.domain.subscription import SubscriptionSummary
from packages.billing.providers.payment.interface import PaymentProviderInterface

logger = get_logger(__name__)

REQUEST_TIMEOUT_SECONDS = 30.0


def escape_path(value: str) -> str:
    """
    Percent-escape one URL path segment, slashes included.

    "." and ".." would be removed as dot segments, so segments made only of
    dots are escaped too.
    """
    escaped = quote(value, safe="")
    if escaped and not escaped.strip("."):
        return "%2E" * len(escaped)
    return escaped


class SidecarPaymentProvider(PaymentProviderInterface):
    """Client for the payments sidecar."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.payments_sidecar_url).rstrip("/")
        self._transport = transport

    async def _request(
        self, method: str, path: str, json: Optional[dict] = None
    ) -> httpx.Response:
        """Send one request; transport errors and non-2xx statuses raise RemoteError."""
        url = f"{self.base_url}{path}"
        try:
            async with httpx.AsyncClient(
                transport=self._transport, timeout=REQUEST_TIMEOUT_SECONDS
            ) as client:
                response = await client.request(method, url, json=json)
        except httpx.HTTPError as e:
            raise RemoteError(f"{method} {path} failed: {e}") from e

        if not response.is_success:
            raise RemoteError(
                f"status {response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
            )
        return response

    @staticmethod
    def _decode(response: httpx.Response, model: Any):
        try:
            return model.model_validate(response.json())
        except (ValueError, PydanticValidationError) as e:
            raise RemoteError(f"malformed response from payments service: {e}") from e

    @trace_span
    async def create_checkout(
        self, org_name: str, success_url: str, cancel_url: str
    ) -> CheckoutSession:
        response = await self._request(
            "POST",
            f"/billing/org/{escape_path(org_name)}/checkout",
            json={"success_url": success_url, "cancel_url": cancel_url},
        )
        checkout = self._decode(response, CheckoutSession)
        if not checkout.checkout_url:
            raise RemoteError("payments service returned an empty checkout_url")

        logger.info(
            f"Created checkout session for org name {org_name}",
            extra={"org_name": org_name, "session_id": checkout.session_id},
        )
        return checkout

    @trace_span
    async def get_checkout_status(self, session_id: str) -> CheckoutStatus:
        try:
            response = await self._request(
                "GET", f"/billing/session/{escape_path(session_id)}"
            )
            status = self._decode(response, CheckoutStatus)
        except RemoteError as e:
            logger.warning(
                f"Checkout status lookup failed for session {session_id}: {e}",
                extra={"session_id": session_id},
            )
            return CheckoutStatus.failed(session_id, str(e))

        if not status.session_id:
            status.session_id = session_id
        return status

    @trace_span
    async def get_subscription(self, subscription_id: str) -> SubscriptionSummary:
        response = await self._request(
            "GET", f"/billing/subscription/{escape_path(subscription_id)}"
        )
        return self._decode(response, SubscriptionSummary)

    @trace_span
    async def set_subscription_quantity(
        self, subscription_id: str, quantity: int
    ) -> None:
        await self._request(
            "POST",
            f"/billing/subscription/{escape_path(subscription_id)}/quantity",
            json={"quantity": quantity},
        )

    @trace_span
    async def create_portal_session(
        self,
        customer_id: str,
        return_url: str,
        subscription_id: Optional[str] = None,
    ) -> str:
        payload = {"customer_id": customer_id, "return_url": return_url}
        if subscription_id:
            payload["subscription_id"] = subscription_id

        response = await self._request("POST", "/billing/portal", json=payload)
        try:
            portal_url = response.json().get("portal_url") or ""
        except (ValueError, AttributeError) as e:
            raise RemoteError(f"malformed response from payments service: {e}") from e
        if not portal_url:
            raise RemoteError("payments service returned an empty portal_url")
        return portal_url
