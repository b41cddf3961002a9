from sqlalchemy import (
    Column,
    String,
    Boolean,
    Integer,
    ForeignKey,
    UniqueConstraint,
    Index,
)
from sqlalchemy.orm import relationship

from common.db.base import Base, BigIntegerType, TimestampMixin
from packages.organizations.models.domain.enums import (
    AccessMode,
    OrganizationVisibility,
)


class OrganizationEntity(TimestampMixin, Base):
    __tablename__ = "organizations"

    id = Column(BigIntegerType, primary_key=True, index=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    lower_name = Column(String(255), nullable=False, unique=True, index=True)
    visibility = Column(
        String(20),
        nullable=False,
        default=OrganizationVisibility.PUBLIC.value,
        server_default=OrganizationVisibility.PUBLIC.value,
    )
    repo_admin_change_team_access = Column(
        Boolean, nullable=False, default=False, server_default="false"
    )


class TeamEntity(TimestampMixin, Base):
    """
    A team inside an organization.

    access_mode is the org-wide level; per-unit levels live in team_units.
    """

    __tablename__ = "teams"

    id = Column(BigIntegerType, primary_key=True, index=True, autoincrement=True)
    org_id = Column(
        BigIntegerType,
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = Column(String(255), nullable=False)
    lower_name = Column(String(255), nullable=False)
    access_mode = Column(
        Integer, nullable=False, default=AccessMode.NONE.value, server_default="0"
    )
    can_create_org_repo = Column(
        Boolean, nullable=False, default=False, server_default="false"
    )
    includes_all_repositories = Column(
        Boolean, nullable=False, default=False, server_default="false"
    )

    units = relationship("TeamUnitEntity", lazy="selectin", order_by="TeamUnitEntity.type")

    __table_args__ = (
        UniqueConstraint("org_id", "lower_name", name="uq_teams_org_id_lower_name"),
    )


class TeamUnitEntity(Base):
    __tablename__ = "team_units"

    id = Column(BigIntegerType, primary_key=True, index=True, autoincrement=True)
    org_id = Column(BigIntegerType, nullable=False, index=True)
    team_id = Column(
        BigIntegerType,
        ForeignKey("teams.id", ondelete="CASCADE"),
        nullable=False,
    )
    type = Column(Integer, nullable=False)
    access_mode = Column(
        Integer, nullable=False, default=AccessMode.NONE.value, server_default="0"
    )

    __table_args__ = (
        UniqueConstraint("team_id", "type", name="uq_team_units_team_id_type"),
    )


class TeamUserEntity(Base):
    __tablename__ = "team_users"

    id = Column(BigIntegerType, primary_key=True, index=True, autoincrement=True)
    org_id = Column(BigIntegerType, nullable=False, index=True)
    team_id = Column(
        BigIntegerType,
        ForeignKey("teams.id", ondelete="CASCADE"),
        nullable=False,
    )
    uid = Column(
        BigIntegerType,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    __table_args__ = (
        UniqueConstraint("team_id", "uid", name="uq_team_users_team_id_uid"),
        Index("idx_team_users_uid", "uid"),
    )
