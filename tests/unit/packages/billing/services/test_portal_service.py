"""
Unit tests for PortalService.
"""

import pytest

from common.core.exceptions import BillingError, NotFoundError, RemoteError
from packages.billing.models.domain.org_billing import OrgBillingUpsertModel
from packages.billing.repositories.org_billing_repository import OrgBillingRepository
from packages.billing.services.portal_service import PortalService
from tests.factories.org_factory import OrgFactory

PORTAL_URL = "https://pay.example.com/portal/1"


async def store_billing(org_id: int, **fields):
    return await OrgBillingRepository().upsert(
        OrgBillingUpsertModel(org_id=org_id, **fields)
    )


@pytest.mark.asyncio
class TestOpenPortal:
    async def test_returns_portal_url(self, sample_org, fake_sidecar):
        await store_billing(sample_org.id, subscription_id="sub_1", customer_id="cus_1")
        fake_sidecar.on("POST", "/billing/portal", body={"portal_url": PORTAL_URL})

        url = await PortalService().open_portal(sample_org.id)

        assert url == PORTAL_URL
        assert fake_sidecar.json_body() == {
            "customer_id": "cus_1",
            "return_url": "https://git.example.com/org/Acme/settings",
            "subscription_id": "sub_1",
        }

    async def test_return_url_escapes_org_name(self, test_db, fake_sidecar):
        org = await OrgFactory.create_org(test_db, "acme labs")
        await store_billing(org.id, customer_id="cus_1")
        fake_sidecar.on("POST", "/billing/portal", body={"portal_url": PORTAL_URL})

        await PortalService().open_portal(org.id)

        body = fake_sidecar.json_body()
        assert body["return_url"] == "https://git.example.com/org/acme%20labs/settings"
        assert "subscription_id" not in body

    async def test_no_record_fails_without_request(self, sample_org, fake_sidecar):
        with pytest.raises(BillingError, match="No billing customer found"):
            await PortalService().open_portal(sample_org.id)

        assert fake_sidecar.requests == []

    async def test_no_customer_and_no_subscription_fails_without_request(
        self, sample_org, fake_sidecar
    ):
        await store_billing(sample_org.id, checkout_session_id="sess_1")

        with pytest.raises(BillingError, match="No billing customer found"):
            await PortalService().open_portal(sample_org.id)

        assert fake_sidecar.requests == []

    async def test_customer_recovered_from_subscription(self, sample_org, fake_sidecar):
        await store_billing(sample_org.id, subscription_id="sub_1")
        fake_sidecar.on(
            "GET",
            "/billing/subscription/sub_1",
            body={"id": "sub_1", "status": "active", "quantity": 2, "customer": "cus_9"},
        )
        fake_sidecar.on("POST", "/billing/portal", body={"portal_url": PORTAL_URL})

        url = await PortalService().open_portal(sample_org.id)

        assert url == PORTAL_URL
        assert fake_sidecar.json_body()["customer_id"] == "cus_9"
        stored = await OrgBillingRepository().get(sample_org.id)
        assert stored.customer_id == "cus_9"
        assert stored.subscription_id == "sub_1"

    async def test_unrecoverable_customer_fails(self, sample_org, fake_sidecar):
        await store_billing(sample_org.id, subscription_id="sub_1")
        fake_sidecar.on("GET", "/billing/subscription/sub_1", status_code=404)

        with pytest.raises(BillingError, match="No billing customer found"):
            await PortalService().open_portal(sample_org.id)

        assert fake_sidecar.paths() == ["/billing/subscription/sub_1"]

    async def test_portal_failure_is_remote_error(self, sample_org, fake_sidecar):
        await store_billing(sample_org.id, customer_id="cus_1")
        fake_sidecar.on("POST", "/billing/portal", status_code=500)

        with pytest.raises(RemoteError):
            await PortalService().open_portal(sample_org.id)

    async def test_unknown_org(self, fake_sidecar):
        with pytest.raises(NotFoundError):
            await PortalService().open_portal(999)
