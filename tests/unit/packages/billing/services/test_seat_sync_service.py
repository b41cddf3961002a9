"""
Unit tests for SeatSyncService.

Seats come from real team membership; the sidecar is a FakeSidecar.
"""

import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, patch

from common.core.exceptions import (
    BillingError,
    RemoteError,
    StorageError,
    TeamLookupError,
)
from packages.billing.models.domain.org_billing import OrgBillingUpsertModel
from packages.billing.repositories.org_billing_repository import OrgBillingRepository
from packages.billing.services.seat_sync_service import SeatSyncService

QUANTITY_PATH = "/billing/subscription/sub_sync/quantity"


@pytest.mark.asyncio
class TestSyncSeats:
    async def test_pushes_count_and_stores_it(self, subscribed_org, fake_sidecar):
        fake_sidecar.on("POST", QUANTITY_PATH, body={"quantity": 3})
        started = datetime.now(timezone.utc).replace(tzinfo=None) - timedelta(
            seconds=1
        )

        saved = await SeatSyncService().sync_seats(subscribed_org.id)

        assert fake_sidecar.paths() == [QUANTITY_PATH]
        assert fake_sidecar.json_body() == {"quantity": 3}
        assert saved.last_seat_count == 3
        stored = await OrgBillingRepository().get(subscribed_org.id)
        assert stored.last_seat_count == 3
        assert stored.last_sync_time.replace(tzinfo=None) >= started
        # Identifiers are untouched by a sync
        assert stored.subscription_id == "sub_sync"
        assert stored.customer_id == "cus_sync"
        assert stored.checkout_session_id == "sess_sync"

    async def test_no_record_fails_without_request(self, org_with_teams, fake_sidecar):
        with pytest.raises(BillingError, match="No subscription to sync"):
            await SeatSyncService().sync_seats(org_with_teams.id)

        assert fake_sidecar.requests == []

    async def test_empty_subscription_fails_without_request(
        self, org_with_teams, fake_sidecar
    ):
        await OrgBillingRepository().upsert(
            OrgBillingUpsertModel(org_id=org_with_teams.id, checkout_session_id="s")
        )

        with pytest.raises(BillingError, match="No subscription to sync"):
            await SeatSyncService().sync_seats(org_with_teams.id)

        assert fake_sidecar.requests == []

    async def test_remote_rejection_leaves_record_unchanged(
        self, subscribed_org, fake_sidecar
    ):
        fake_sidecar.on("POST", QUANTITY_PATH, status_code=400)
        before = await OrgBillingRepository().get(subscribed_org.id)

        with pytest.raises(RemoteError):
            await SeatSyncService().sync_seats(subscribed_org.id)

        after = await OrgBillingRepository().get(subscribed_org.id)
        assert after.last_seat_count == before.last_seat_count == 1
        assert after.last_sync_time is None

    async def test_unreachable_sidecar_leaves_record_unchanged(
        self, subscribed_org, fake_sidecar
    ):
        fake_sidecar.fail("POST", QUANTITY_PATH)

        with pytest.raises(RemoteError):
            await SeatSyncService().sync_seats(subscribed_org.id)

        after = await OrgBillingRepository().get(subscribed_org.id)
        assert after.last_seat_count == 1

    async def test_seat_lookup_failure_makes_no_request(
        self, subscribed_org, fake_sidecar
    ):
        service = SeatSyncService()
        service.seat_service.team_repo.find_org_teams = AsyncMock(
            side_effect=StorageError("database unavailable")
        )

        with pytest.raises(TeamLookupError):
            await service.sync_seats(subscribed_org.id)

        assert fake_sidecar.requests == []

    async def test_storage_failure_after_accepted_push_surfaces(
        self, subscribed_org, fake_sidecar
    ):
        fake_sidecar.on("POST", QUANTITY_PATH, body={})
        service = SeatSyncService()

        with patch.object(
            service.org_billing_repo,
            "upsert",
            AsyncMock(side_effect=StorageError("disk full")),
        ):
            with pytest.raises(StorageError):
                await service.sync_seats(subscribed_org.id)

        assert len(fake_sidecar.requests) == 1
