"""
Repository for organization teams, their unit grants and their members.
"""

from typing import List
from sqlalchemy import select

from common.repositories.base import BaseRepository
from packages.organizations.models.database.organization import (
    TeamEntity,
    TeamUnitEntity,
    TeamUserEntity,
)
from packages.organizations.models.domain.organization import Team, TeamCreateModel
from common.core.otel_axiom_exporter import trace_span


class TeamRepository(BaseRepository[TeamEntity, Team]):
    """Teams are always loaded together with their units."""

    def __init__(self):
        super().__init__(TeamEntity, Team)

    @trace_span
    async def find_org_teams(self, org_id: int) -> List[Team]:
        """All teams of an organization, ordered by ID."""
        query = self._add_org_filter(select(TeamEntity), org_id).order_by(
            TeamEntity.id
        )
        async with self._get_session() as session:
            result = await session.execute(query)
            return self._entities_to_domain(result.scalars().all())

    @trace_span
    async def get_team_member_ids(self, team_id: int) -> List[int]:
        async with self._get_session() as session:
            result = await session.execute(
                select(TeamUserEntity.uid)
                .where(TeamUserEntity.team_id == team_id)
                .order_by(TeamUserEntity.uid)
            )
            return list(result.scalars().all())

    @trace_span
    async def create_team(self, create_model: TeamCreateModel) -> Team:
        db_team = TeamEntity(
            org_id=create_model.org_id,
            name=create_model.name,
            lower_name=create_model.name.lower(),
            access_mode=create_model.access_mode.value,
            can_create_org_repo=create_model.can_create_org_repo,
            includes_all_repositories=create_model.includes_all_repositories,
        )
        async with self._get_session() as session:
            session.add(db_team)
            await session.flush()
            session.add_all(
                [
                    TeamUnitEntity(
                        org_id=create_model.org_id,
                        team_id=db_team.id,
                        type=unit.type.value,
                        access_mode=unit.access_mode.value,
                    )
                    for unit in create_model.units
                ]
            )
            await session.flush()

            # Reload so server defaults and the units collection are populated
            result = await session.execute(
                select(TeamEntity)
                .where(TeamEntity.id == db_team.id)
                .execution_options(populate_existing=True)
            )
            return self._entity_to_domain(result.scalar_one())

    @trace_span
    async def add_member(self, org_id: int, team_id: int, user_id: int) -> None:
        async with self._get_session() as session:
            session.add(TeamUserEntity(org_id=org_id, team_id=team_id, uid=user_id))
            await session.flush()
