from typing import Optional
from sqlalchemy import select

from common.repositories.base import BaseRepository
from packages.organizations.models.database.organization import OrganizationEntity
from packages.organizations.models.domain.organization import (
    Organization,
    OrganizationCreateModel,
)
from common.core.otel_axiom_exporter import trace_span


class OrganizationRepository(BaseRepository[OrganizationEntity, Organization]):
    def __init__(self):
        super().__init__(OrganizationEntity, Organization)

    @trace_span
    async def get_by_name(self, name: str) -> Optional[Organization]:
        """Get organization by name (case-insensitive)."""
        async with self._get_session() as session:
            result = await session.execute(
                select(OrganizationEntity).where(
                    OrganizationEntity.lower_name == name.lower()
                )
            )
            db_org = result.scalar_one_or_none()
            return self._entity_to_domain(db_org) if db_org else None

    @trace_span
    async def create_organization(
        self, create_model: OrganizationCreateModel
    ) -> Organization:
        db_org = OrganizationEntity(
            name=create_model.name,
            lower_name=create_model.name.lower(),
            visibility=create_model.visibility.value,
            repo_admin_change_team_access=create_model.repo_admin_change_team_access,
        )
        async with self._get_session() as session:
            session.add(db_org)
            await session.flush()
            await session.refresh(db_org)
            return self._entity_to_domain(db_org)
