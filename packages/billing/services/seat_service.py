"""
Service computing billable seats from team membership.
"""

from typing import Set
from sqlalchemy.exc import SQLAlchemyError

from common.core.exceptions import StorageError, TeamLookupError
from common.core.otel_axiom_exporter import trace_span, get_logger
from packages.billing.models.domain.seats import SeatSet
from packages.organizations.models.domain.enums import AccessMode, UnitType
from packages.organizations.models.domain.organization import Team
from packages.organizations.repositories.team_repository import TeamRepository

logger = get_logger(__name__)


def team_grants_seat(team: Team) -> bool:
    """
    Whether members of a team hold a billable seat.

    True for the owner team, teams allowed to create organization
    repositories, and teams with write-or-higher access either org-wide
    or on the code unit.
    """
    return (
        team.is_owner_team()
        or team.can_create_org_repo
        or team.access_mode >= AccessMode.WRITE
        or team.unit_access_mode(UnitType.CODE) >= AccessMode.WRITE
    )


class SeatService:
    """Recomputes seats from current membership on every call."""

    def __init__(self):
        self.team_repo = TeamRepository()

    @trace_span
    async def compute_write_member_ids(self, org_id: int) -> SeatSet:
        """
        Distinct IDs of users on qualifying teams of an organization.

        Raises:
            TeamLookupError: team or member enumeration failed; no partial
                result is returned
        """
        member_ids: Set[int] = set()
        try:
            teams = await self.team_repo.find_org_teams(org_id)
            for team in teams:
                if not team_grants_seat(team):
                    continue
                member_ids.update(await self.team_repo.get_team_member_ids(team.id))
        except (StorageError, SQLAlchemyError) as e:
            logger.error(
                f"Failed to enumerate teams of org {org_id}: {e}",
                extra={"org_id": org_id},
            )
            raise TeamLookupError(
                f"Failed to enumerate teams of organization {org_id}: {e}"
            ) from e

        seats = SeatSet(org_id=org_id, member_ids=frozenset(member_ids))
        logger.debug(
            f"Computed {seats.count} seats for org {org_id}",
            extra={"org_id": org_id, "seat_count": seats.count},
        )
        return seats
