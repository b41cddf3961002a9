"""
Repository for per-organization billing records.
"""

from typing import Optional
from sqlalchemy import select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import func

from common.repositories.base import BaseRepository
from common.core.otel_axiom_exporter import trace_span, get_logger
from packages.billing.models.database.org_billing import (
    OrgBillingEntity,
    MUTABLE_COLUMNS,
)
from packages.billing.models.domain.org_billing import (
    OrgBilling,
    OrgBillingUpsertModel,
)

logger = get_logger(__name__)

# Dialects with a native INSERT ... ON CONFLICT DO UPDATE
CONFLICT_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


class OrgBillingRepository(BaseRepository[OrgBillingEntity, OrgBilling]):
    """Billing record store, keyed by organization ID."""

    def __init__(self):
        super().__init__(OrgBillingEntity, OrgBilling)

    @trace_span
    async def get(self, org_id: int) -> Optional[OrgBilling]:
        """Billing record of an organization, or None when it has none."""
        async with self._get_session() as session:
            result = await session.execute(
                select(OrgBillingEntity).where(OrgBillingEntity.org_id == org_id)
            )
            entity = result.scalar_one_or_none()
            return self._entity_to_domain(entity) if entity else None

    @trace_span
    async def get_by_checkout_session_id(self, session_id: str) -> Optional[OrgBilling]:
        """Billing record already linked to a checkout session, if any."""
        if not session_id:
            return None
        async with self._get_session() as session:
            result = await session.execute(
                select(OrgBillingEntity)
                .where(OrgBillingEntity.checkout_session_id == session_id)
                .order_by(OrgBillingEntity.org_id)
                .limit(1)
            )
            entity = result.scalar_one_or_none()
            return self._entity_to_domain(entity) if entity else None

    @trace_span
    async def upsert(self, record: OrgBillingUpsertModel) -> Optional[OrgBilling]:
        """
        Insert or update the billing record of record.org_id.

        Writes exactly the mutable fields; created_at/updated_at are managed
        by the database. A zero org_id is ignored and returns None.
        """
        if not record.org_id:
            return None

        values = record.model_dump(include=set(MUTABLE_COLUMNS))

        async with self._get_session() as session:
            conflict_insert = CONFLICT_INSERTS.get(session.get_bind().dialect.name)
            if conflict_insert is not None:
                stmt = conflict_insert(OrgBillingEntity).values(
                    org_id=record.org_id, **values
                )
                stmt = stmt.on_conflict_do_update(
                    index_elements=[OrgBillingEntity.org_id],
                    set_={**values, "updated_at": func.now()},
                )
                await session.execute(stmt)
            else:
                await self._upsert_by_existence(session, record.org_id, values)
            await session.flush()

            result = await session.execute(
                select(OrgBillingEntity)
                .where(OrgBillingEntity.org_id == record.org_id)
                .execution_options(populate_existing=True)
            )
            saved = self._entity_to_domain(result.scalar_one())

        logger.debug(
            f"Upserted billing record for org {record.org_id}",
            extra={
                "org_id": record.org_id,
                "subscription_id": saved.subscription_id,
                "last_seat_count": saved.last_seat_count,
            },
        )
        return saved

    async def _upsert_by_existence(
        self, session: AsyncSession, org_id: int, values: dict
    ) -> None:
        """Existence check then write; a racing insert is retried as an update."""
        exists = await session.scalar(
            select(OrgBillingEntity.org_id).where(OrgBillingEntity.org_id == org_id)
        )
        if exists is None:
            try:
                async with session.begin_nested():
                    await session.execute(
                        OrgBillingEntity.__table__.insert().values(
                            org_id=org_id, **values
                        )
                    )
                return
            except IntegrityError:
                logger.info(
                    f"Concurrent billing record insert for org {org_id}, retrying as update",
                    extra={"org_id": org_id},
                )

        await session.execute(
            update(OrgBillingEntity)
            .where(OrgBillingEntity.org_id == org_id)
            .values(**values, updated_at=func.now())
        )
