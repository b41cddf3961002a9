"""
Interface for payment providers.

Abstracts the billing microservice that owns subscription and customer state.
Each call is a single request with no internal retry; retry policy belongs to
the caller.
"""

from abc import ABC, abstractmethod
from typing import Optional

from packages.billing.models.domain.checkout import CheckoutSession, CheckoutStatus
from packages.billing.models.domain.subscription import SubscriptionSummary


class PaymentProviderInterface(ABC):
    """Abstract interface for payment providers."""

    @abstractmethod
    async def create_checkout(
        self,
        org_name: str,
        success_url: str,
        cancel_url: str,
    ) -> CheckoutSession:
        """
        Create a checkout session for a not-yet-created organization.

        Args:
            org_name: Name the organization will be created with
            success_url: URL to redirect to after payment
            cancel_url: URL to redirect to when the user backs out

        Returns:
            CheckoutSession with a non-empty checkout_url

        Raises:
            RemoteError: non-2xx status, malformed body or empty checkout_url
        """
        pass

    @abstractmethod
    async def get_checkout_status(self, session_id: str) -> CheckoutStatus:
        """
        Poll a checkout session.

        Never raises: transport, HTTP and decode failures come back as a
        non-paid CheckoutStatus whose status describes the failure.
        """
        pass

    @abstractmethod
    async def get_subscription(self, subscription_id: str) -> SubscriptionSummary:
        """
        Fetch a subscription.

        Raises:
            RemoteError: non-2xx status or malformed body
        """
        pass

    @abstractmethod
    async def set_subscription_quantity(
        self, subscription_id: str, quantity: int
    ) -> None:
        """
        Set the seat quantity of a subscription.

        Raises:
            RemoteError: transport failure or non-2xx status
        """
        pass

    @abstractmethod
    async def create_portal_session(
        self,
        customer_id: str,
        return_url: str,
        subscription_id: Optional[str] = None,
    ) -> str:
        """
        Create a customer portal session.

        Returns:
            portal_url: URL of the customer portal

        Raises:
            RemoteError: non-2xx status, malformed body or empty portal_url
        """
        pass
