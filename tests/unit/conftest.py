import pytest
from unittest.mock import AsyncMock, patch

from packages.billing.providers.payment.interface import PaymentProviderInterface
from tests.factories.sidecar import FakeSidecar

# Modules that build a payment provider on service construction
PAYMENT_PROVIDER_FACTORIES = (
    "packages.billing.services.checkout_service.get_payment_provider",
    "packages.billing.services.seat_sync_service.get_payment_provider",
    "packages.billing.services.portal_service.get_payment_provider",
)


@pytest.fixture
def mock_payment_provider():
    """Create a mocked payment provider."""
    return AsyncMock(spec=PaymentProviderInterface)


@pytest.fixture
def fake_sidecar():
    """
    Route every billing service to a FakeSidecar over httpx.MockTransport.

    Tests register responses with fake_sidecar.on(...) and inspect
    fake_sidecar.requests afterwards.
    """
    sidecar = FakeSidecar()
    patchers = [patch(target, side_effect=sidecar.provider) for target in PAYMENT_PROVIDER_FACTORIES]
    for patcher in patchers:
        patcher.start()
    try:
        yield sidecar
    finally:
        for patcher in reversed(patchers):
            patcher.stop()
