"""
Role catalogue and the per-role scoping rules.

Roles are a closed enumeration. Every table below has an entry for every
member, so adding a role forces an explicit decision about how it is
scoped instead of silently falling through to "denied".
"""

from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    OWNER = "Owner"
    ORG_ADMIN = "Organization Admin"
    SITE_ADMIN = "Site Admin"
    VIEWER = "Viewer"
    PENDING = "Pending User"
    # Stand-in for a role row whose name is not in this catalogue
    UNRECOGNIZED = "Unrecognized"

    @classmethod
    def from_name(cls, name: str | None) -> "Role":
        for role in cls:
            if role is not cls.UNRECOGNIZED and role.value == name:
                return role
        return cls.UNRECOGNIZED


# Fixed reference rows (id, role); seeded by migration and on startup
ROLE_REFERENCE_ROWS: tuple[tuple[int, Role], ...] = (
    (1, Role.OWNER),
    (2, Role.ORG_ADMIN),
    (3, Role.SITE_ADMIN),
    (4, Role.VIEWER),
    (5, Role.PENDING),
)

PENDING_ROLE_ID = 5


class Scope(str, Enum):
    """How a role's GlobalPermission grants are matched against a target."""

    UNRESTRICTED = "unrestricted"  # no grant needed
    BUILDING = "building"  # any grant on the target building
    FLOOR = "floor"  # a grant naming the target floor
    ANY_GRANT = "any_grant"  # semi-join: any grant touching the row
    OWN_GROUPS = "own_groups"  # rows whose group the user belongs to
    NONE = "none"  # never


# Mutation authorization on a building (canManageBuilding)
MANAGE_BUILDING_SCOPE: dict[Role, Scope] = {
    Role.OWNER: Scope.UNRESTRICTED,
    Role.ORG_ADMIN: Scope.BUILDING,
    Role.SITE_ADMIN: Scope.BUILDING,
    Role.VIEWER: Scope.NONE,
    Role.PENDING: Scope.NONE,
    Role.UNRECOGNIZED: Scope.NONE,
}

# Mutation authorization on a floor (canManageFloor). Organization Admins
# are granted floor by floor; Site Admins administer whole buildings.
MANAGE_FLOOR_SCOPE: dict[Role, Scope] = {
    Role.OWNER: Scope.UNRESTRICTED,
    Role.ORG_ADMIN: Scope.FLOOR,
    Role.SITE_ADMIN: Scope.BUILDING,
    Role.VIEWER: Scope.NONE,
    Role.PENDING: Scope.NONE,
    Role.UNRECOGNIZED: Scope.NONE,
}

# Floor detail, floor building and per-floor stats: uniformly strict
READ_FLOOR_SCOPE: dict[Role, Scope] = {
    Role.OWNER: Scope.UNRESTRICTED,
    Role.ORG_ADMIN: Scope.FLOOR,
    Role.SITE_ADMIN: Scope.FLOOR,
    Role.VIEWER: Scope.FLOOR,
    Role.PENDING: Scope.FLOOR,
    Role.UNRECOGNIZED: Scope.FLOOR,
}

# Admin CRUD listings (/admin/buildings, floors, aps, devices)
ADMIN_LIST_SCOPE: dict[Role, Scope] = {
    Role.OWNER: Scope.UNRESTRICTED,
    Role.ORG_ADMIN: Scope.ANY_GRANT,
    Role.SITE_ADMIN: Scope.ANY_GRANT,
    Role.VIEWER: Scope.NONE,
    Role.PENDING: Scope.NONE,
    Role.UNRECOGNIZED: Scope.NONE,
}

# General floor listing (/floors); Viewers may browse here
FLOOR_LIST_SCOPE: dict[Role, Scope] = {
    Role.OWNER: Scope.UNRESTRICTED,
    Role.ORG_ADMIN: Scope.ANY_GRANT,
    Role.SITE_ADMIN: Scope.ANY_GRANT,
    Role.VIEWER: Scope.ANY_GRANT,
    Role.PENDING: Scope.NONE,
    Role.UNRECOGNIZED: Scope.NONE,
}

# Floor creation: Organization Admins need a grant on the target building;
# Site Admins may not create floors at all
FLOOR_CREATE_SCOPE: dict[Role, Scope] = {
    Role.OWNER: Scope.UNRESTRICTED,
    Role.ORG_ADMIN: Scope.BUILDING,
    Role.SITE_ADMIN: Scope.NONE,
    Role.VIEWER: Scope.NONE,
    Role.PENDING: Scope.NONE,
    Role.UNRECOGNIZED: Scope.NONE,
}

# Floor rename, map replacement and deletion. Allowed roles then go
# through MANAGE_FLOOR_SCOPE.
FLOOR_EDIT_SCOPE: dict[Role, Scope] = {
    Role.OWNER: Scope.UNRESTRICTED,
    Role.ORG_ADMIN: Scope.FLOOR,
    Role.SITE_ADMIN: Scope.NONE,
    Role.VIEWER: Scope.NONE,
    Role.PENDING: Scope.NONE,
    Role.UNRECOGNIZED: Scope.NONE,
}

# GlobalPermission listing and administration
GRANT_ADMIN_SCOPE: dict[Role, Scope] = {
    Role.OWNER: Scope.UNRESTRICTED,
    Role.ORG_ADMIN: Scope.OWN_GROUPS,
    Role.SITE_ADMIN: Scope.NONE,
    Role.VIEWER: Scope.NONE,
    Role.PENDING: Scope.NONE,
    Role.UNRECOGNIZED: Scope.NONE,
}

ADMIN_ROLES: frozenset[Role] = frozenset({Role.OWNER, Role.ORG_ADMIN, Role.SITE_ADMIN})
OWNER_ONLY: frozenset[Role] = frozenset({Role.OWNER})

SCOPE_TABLES: tuple[dict[Role, Scope], ...] = (
    MANAGE_BUILDING_SCOPE,
    MANAGE_FLOOR_SCOPE,
    READ_FLOOR_SCOPE,
    ADMIN_LIST_SCOPE,
    FLOOR_LIST_SCOPE,
    FLOOR_CREATE_SCOPE,
    FLOOR_EDIT_SCOPE,
    GRANT_ADMIN_SCOPE,
)
