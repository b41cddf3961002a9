"""
Domain models for organizations and their teams.
"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from common.core.constants import OWNER_TEAM_NAME
from packages.billing.models.domain.org_billing import OrgBilling
from packages.organizations.models.domain.enums import (
    AccessMode,
    OrganizationVisibility,
    UnitType,
)


class Organization(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    lower_name: str
    visibility: OrganizationVisibility = OrganizationVisibility.PUBLIC
    repo_admin_change_team_access: bool = False
    created_at: datetime
    updated_at: datetime


class OrganizationCreateModel(BaseModel):
    """Model for creating a new organization."""

    name: str = Field(..., min_length=1, max_length=255)
    visibility: OrganizationVisibility = OrganizationVisibility.PUBLIC
    repo_admin_change_team_access: bool = False

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("organization name must not be blank")
        return v


class TeamUnit(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    type: UnitType
    access_mode: AccessMode = AccessMode.NONE


class Team(BaseModel):
    """
    Organization team with its org-wide access level and per-unit grants.
    """

    model_config = ConfigDict(from_attributes=True)

    id: int
    org_id: int
    name: str
    access_mode: AccessMode = AccessMode.NONE
    can_create_org_repo: bool = False
    includes_all_repositories: bool = False
    units: List[TeamUnit] = Field(default_factory=list)

    def is_owner_team(self) -> bool:
        return self.name == OWNER_TEAM_NAME

    def unit_access_mode(self, unit_type: UnitType) -> AccessMode:
        """Access granted on one unit, NONE when the team has no such unit."""
        for unit in self.units:
            if unit.type == unit_type:
                return unit.access_mode
        return AccessMode.NONE


class TeamCreateModel(BaseModel):
    """Model for creating a team, including its unit grants."""

    org_id: int
    name: str = Field(..., min_length=1, max_length=255)
    access_mode: AccessMode = AccessMode.NONE
    can_create_org_repo: bool = False
    includes_all_repositories: bool = False
    units: List[TeamUnit] = Field(default_factory=list)


class OrganizationCreation(BaseModel):
    """A created organization and the billing record linked to it, if any."""

    organization: Organization
    owner_team: Team
    billing: Optional[OrgBilling] = None
