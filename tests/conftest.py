# Shared pytest configuration and fixtures for all test types
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from slowapi import Limiter
from slowapi.util import get_remote_address
from unittest.mock import patch

# Create test limiter with no limits and in-memory storage
test_limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[],
    storage_uri="memory://",
    enabled=False,
)

# Patch the limiter before importing the app so decorators use test limiter
with patch("common.providers.rate_limiter.limiter.limiter", test_limiter):
    from api.main import app

from common.core.config import settings
from common.db.session import get_db
from common.db.base import Base
from packages.users.models.database.user import UserEntity  # noqa: F401
from packages.organizations.models.database.organization import (  # noqa: F401
    OrganizationEntity,
    TeamEntity,
)
from packages.organizations.models.domain.enums import AccessMode, UnitType
from packages.billing.models.database.org_billing import OrgBillingEntity
from tests.factories.org_factory import OrgFactory

# Test database URL
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Create test database engine and initialize schema."""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def test_connection(test_engine):
    """Create test connection with outer transaction for rollback isolation."""
    async with test_engine.connect() as connection:
        trans = await connection.begin()
        yield connection
        await trans.rollback()


@pytest_asyncio.fixture(scope="function")
async def test_session_factory(test_connection):
    """Create session factory bound to test connection.

    Using join_transaction_mode="create_savepoint" so nested transaction()
    calls create savepoints instead of real nested transactions.
    """
    return async_sessionmaker(
        bind=test_connection,
        class_=AsyncSession,
        expire_on_commit=False,
        join_transaction_mode="create_savepoint",
    )


@pytest_asyncio.fixture(scope="function")
async def test_db(test_session_factory):
    """Create a test database session."""
    async with test_session_factory() as session:
        yield session


@pytest_asyncio.fixture(scope="function", autouse=True)
async def patch_lazy_sessions(test_session_factory, monkeypatch):
    """
    Patch session factories to use test database.

    This allows real transaction() and get_session() to run with proper
    commit/rollback/ContextVar semantics while using the test database.
    """
    monkeypatch.setattr("common.db.scoped.AsyncSessionLocal", test_session_factory)
    monkeypatch.setattr(
        "common.db.scoped.AsyncSessionLocalReadonly", test_session_factory
    )


@pytest_asyncio.fixture(scope="function", autouse=True)
async def default_payment_settings(monkeypatch):
    """Pin payment settings so a local .env cannot leak into tests."""
    monkeypatch.setattr(settings, "payments_enabled", False)
    monkeypatch.setattr(settings, "payments_verify_billing_token", False)
    monkeypatch.setattr(settings, "payments_sidecar_url", "http://payments.test")
    monkeypatch.setattr(settings, "app_url", "https://git.example.com/")


@pytest_asyncio.fixture(scope="function")
async def payments_enabled(monkeypatch):
    monkeypatch.setattr(settings, "payments_enabled", True)


@pytest_asyncio.fixture(scope="function")
async def client(test_db: AsyncSession):
    """Create a test client."""

    def override_get_db():
        try:
            yield test_db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    try:
        async with AsyncClient(
            transport=ASGITransport(app=app), base_url="http://test"
        ) as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()


@pytest_asyncio.fixture(scope="function")
async def owner_user(test_db: AsyncSession):
    return await OrgFactory.create_user(test_db, "Owner")


@pytest_asyncio.fixture(scope="function")
async def member_users(test_db: AsyncSession):
    """Three plain users: alice, bob, carol."""
    return [
        await OrgFactory.create_user(test_db, name) for name in ("alice", "bob", "carol")
    ]


@pytest_asyncio.fixture(scope="function")
async def sample_org(test_db: AsyncSession):
    return await OrgFactory.create_org(test_db, "Acme")


@pytest_asyncio.fixture(scope="function")
async def org_with_teams(test_db: AsyncSession, sample_org, owner_user, member_users):
    """
    Organization with one team per seat rule plus a read-only team.

    owner (Owners), alice (writers + coders), bob (repo-creators) and carol
    (readers only). Seats: owner, alice, bob.
    """
    alice, bob, carol = member_users
    await OrgFactory.create_team(
        test_db,
        sample_org,
        "Owners",
        access_mode=AccessMode.OWNER,
        members=[owner_user],
    )
    await OrgFactory.create_team(
        test_db, sample_org, "writers", access_mode=AccessMode.WRITE, members=[alice]
    )
    await OrgFactory.create_team(
        test_db,
        sample_org,
        "coders",
        access_mode=AccessMode.READ,
        units={UnitType.CODE: AccessMode.WRITE, UnitType.ISSUES: AccessMode.READ},
        members=[alice],
    )
    await OrgFactory.create_team(
        test_db,
        sample_org,
        "repo-creators",
        access_mode=AccessMode.NONE,
        can_create_org_repo=True,
        members=[bob],
    )
    await OrgFactory.create_team(
        test_db,
        sample_org,
        "readers",
        access_mode=AccessMode.READ,
        units={UnitType.CODE: AccessMode.READ, UnitType.WIKI: AccessMode.WRITE},
        members=[carol, alice],
    )
    return sample_org


@pytest_asyncio.fixture(scope="function")
async def subscribed_org(test_db: AsyncSession, org_with_teams):
    """org_with_teams with a billing record holding subscription sub_sync."""
    test_db.add(
        OrgBillingEntity(
            org_id=org_with_teams.id,
            subscription_id="sub_sync",
            customer_id="cus_sync",
            checkout_session_id="sess_sync",
            last_seat_count=1,
        )
    )
    await test_db.commit()
    return org_with_teams
