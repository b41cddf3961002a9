import asyncio

import pytest
import pytest_asyncio
from sqlalchemy import func, select, text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from common.db.base import Base
from common.db.context import _force_readonly, get_current_session, in_transaction
from common.db.scoped import get_session, transaction
from packages.organizations.models.database.organization import OrganizationEntity

# Separate engine so commits are real and visible across sessions
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


def org(name: str) -> OrganizationEntity:
    return OrganizationEntity(name=name, lower_name=name.lower(), visibility="public")


@pytest_asyncio.fixture(scope="function")
async def scoped_test_engine():
    engine = create_async_engine(TEST_DATABASE_URL, echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def scoped_session_factory(scoped_test_engine):
    return async_sessionmaker(
        scoped_test_engine, class_=AsyncSession, expire_on_commit=False
    )


@pytest_asyncio.fixture(scope="function")
async def patch_session_factories(scoped_session_factory, monkeypatch):
    """Point scoped.py at the standalone engine."""
    monkeypatch.setattr("common.db.scoped.AsyncSessionLocal", scoped_session_factory)
    monkeypatch.setattr(
        "common.db.scoped.AsyncSessionLocalReadonly", scoped_session_factory
    )
    yield


async def org_names(session_factory) -> list:
    async with session_factory() as session:
        result = await session.execute(
            select(OrganizationEntity.name).order_by(OrganizationEntity.name)
        )
        return list(result.scalars().all())


class TestTransaction:
    """transaction() against a real database."""

    async def test_commits_on_success(
        self, patch_session_factories, scoped_session_factory
    ):
        async with transaction() as session:
            session.add(org("Committed"))

        assert await org_names(scoped_session_factory) == ["Committed"]

    async def test_rolls_back_on_exception(
        self, patch_session_factories, scoped_session_factory
    ):
        with pytest.raises(ValueError):
            async with transaction() as session:
                session.add(org("RolledBack"))
                await session.flush()
                raise ValueError("owner team creation failed")

        assert await org_names(scoped_session_factory) == []

    async def test_publishes_session_to_context(self, patch_session_factories):
        async with transaction() as session:
            assert get_current_session(readonly=False) is session
            assert in_transaction(readonly=False) is True

        assert get_current_session(readonly=False) is None
        assert in_transaction(readonly=False) is False

    async def test_readonly_transaction_does_not_commit(
        self, patch_session_factories, scoped_session_factory
    ):
        async with transaction(readonly=True) as session:
            session.add(org("NeverCommitted"))
            await session.flush()

        assert await org_names(scoped_session_factory) == []


class TestGetSession:
    """get_session() joins an enclosing transaction or stands alone."""

    async def test_standalone_commits(
        self, patch_session_factories, scoped_session_factory
    ):
        async with get_session() as session:
            session.add(org("Standalone"))

        assert await org_names(scoped_session_factory) == ["Standalone"]

    async def test_standalone_rolls_back(
        self, patch_session_factories, scoped_session_factory
    ):
        with pytest.raises(RuntimeError):
            async with get_session() as session:
                session.add(org("Broken"))
                await session.flush()
                raise RuntimeError("boom")

        assert await org_names(scoped_session_factory) == []

    async def test_joins_enclosing_transaction(
        self, patch_session_factories, scoped_session_factory
    ):
        with pytest.raises(ValueError):
            async with transaction() as outer:
                async with get_session() as inner:
                    assert inner is outer
                    inner.add(org("Joined"))
                    await inner.flush()
                raise ValueError("fail after the inner operation")

        # The inner operation is undone with the transaction
        assert await org_names(scoped_session_factory) == []

    async def test_several_operations_commit_together(
        self, patch_session_factories, scoped_session_factory
    ):
        async with transaction():
            for name in ("One", "Two", "Three"):
                async with get_session() as session:
                    session.add(org(name))
                    await session.flush()

        async with scoped_session_factory() as session:
            count = await session.scalar(
                select(func.count()).select_from(OrganizationEntity)
            )
        assert count == 3

    async def test_forced_readonly_skips_commit(
        self, patch_session_factories, scoped_session_factory
    ):
        token = _force_readonly.set(True)
        try:
            async with get_session() as session:
                result = await session.execute(text("SELECT 1"))
                assert result.scalar() == 1
                session.add(org("ReadOnly"))
                await session.flush()
        finally:
            _force_readonly.reset(token)

        assert await org_names(scoped_session_factory) == []


class TestConcurrentTransactions:
    async def test_concurrent_transactions_are_isolated(
        self, patch_session_factories, scoped_session_factory
    ):
        results = {}

        async def create(name: str, delay: float, fail: bool):
            try:
                async with transaction() as session:
                    session.add(org(name))
                    await asyncio.sleep(delay)
                    results[name] = get_current_session(readonly=False) is session
                    if fail:
                        raise ValueError("name taken")
            except ValueError:
                pass

        await asyncio.gather(
            create("Alpha", 0.01, False),
            create("Beta", 0.005, True),
            create("Gamma", 0.015, False),
        )

        assert results == {"Alpha": True, "Beta": True, "Gamma": True}
        assert await org_names(scoped_session_factory) == ["Alpha", "Gamma"]
