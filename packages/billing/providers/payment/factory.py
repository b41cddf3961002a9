"""
Factory for getting payment provider instance.
"""

from packages.billing.providers.payment.interface import PaymentProviderInterface
from packages.billing.providers.payment.sidecar_payment import SidecarPaymentProvider


def get_payment_provider() -> PaymentProviderInterface:
    """
    Get the payment provider for the configured payments sidecar.

    Built per call so a changed sidecar URL applies to the next request.
    """
    return SidecarPaymentProvider()
