"""
Organization enums - access levels, repository capability units and visibility.
"""

from enum import Enum, IntEnum


class AccessMode(IntEnum):
    """
    Access level a team grants, ordered so levels compare with < and >=.

    Stored as its integer value.
    """

    NONE = 0
    READ = 1
    WRITE = 2
    ADMIN = 3
    OWNER = 4


class UnitType(IntEnum):
    """Repository capability units a team can be granted access to."""

    CODE = 1
    ISSUES = 2
    PULL_REQUESTS = 3
    RELEASES = 4
    WIKI = 5
    EXTERNAL_WIKI = 6
    EXTERNAL_TRACKER = 7
    PROJECTS = 8
    PACKAGES = 9
    ACTIONS = 10


class OrganizationVisibility(str, Enum):
    PUBLIC = "public"
    LIMITED = "limited"
    PRIVATE = "private"
