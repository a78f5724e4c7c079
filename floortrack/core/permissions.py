"""
Permission Evaluator.

Decides whether a user may manage a building or a floor, or read a
floor through the strict floor-scoped read path. Each decision looks up
the user's role in a scope table from ``floortrack.core.roles`` and
matches it against GlobalPermission grants for the user's groups.

Denial is a normal ``False`` return. Callers turn it into a 403.
"""

from __future__ import annotations

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from floortrack.core.errors import ForbiddenError
from floortrack.core.roles import (
    MANAGE_BUILDING_SCOPE,
    MANAGE_FLOOR_SCOPE,
    READ_FLOOR_SCOPE,
    Role,
    Scope,
)
from floortrack.repositories.building import floor_repository
from floortrack.repositories.global_permission import global_permission_repository
from floortrack.services.identity import AppUser

logger = structlog.get_logger()


class PermissionEvaluator:
    async def can_manage_building(self, db: AsyncSession, user: AppUser, building_id: int) -> bool:
        """No existence check: an Owner may manage any building id"""
        scope = MANAGE_BUILDING_SCOPE[user.role]
        if scope is Scope.UNRESTRICTED:
            allowed = True
        elif scope is Scope.NONE or not user.has_groups:
            allowed = False
        elif scope is Scope.BUILDING:
            allowed = await global_permission_repository.grant_exists(
                db, group_ids=user.group_ids, building_id=building_id
            )
        else:
            raise AssertionError(f"Unhandled building scope {scope}")

        self._log("manage_building", user, building_id, allowed)
        return allowed

    async def can_manage_floor(self, db: AsyncSession, user: AppUser, floor_id: int) -> bool:
        scope = MANAGE_FLOOR_SCOPE[user.role]
        if scope is Scope.UNRESTRICTED:
            self._log("manage_floor", user, floor_id, True)
            return True

        if scope is Scope.NONE or not user.has_groups:
            self._log("manage_floor", user, floor_id, False)
            return False

        building_id = await floor_repository.get_building_id(db, floor_id)
        if building_id is None:
            allowed = False
        elif scope is Scope.FLOOR:
            allowed = await global_permission_repository.grant_exists(
                db, group_ids=user.group_ids, floor_id=floor_id
            )
        elif scope is Scope.BUILDING:
            allowed = await global_permission_repository.grant_exists(
                db, group_ids=user.group_ids, building_id=building_id
            )
        else:
            raise AssertionError(f"Unhandled floor scope {scope}")

        self._log("manage_floor", user, floor_id, allowed)
        return allowed

    async def can_read_floor(self, db: AsyncSession, user: AppUser, floor_id: int) -> bool:
        """Strict floor-scoped read: a grant naming this exact floor"""
        scope = READ_FLOOR_SCOPE[user.role]
        if scope is Scope.UNRESTRICTED:
            allowed = True
        elif scope is Scope.NONE or not user.has_groups:
            allowed = False
        elif scope is Scope.FLOOR:
            allowed = await global_permission_repository.grant_exists(
                db, group_ids=user.group_ids, floor_id=floor_id
            )
        else:
            raise AssertionError(f"Unhandled floor read scope {scope}")

        self._log("read_floor", user, floor_id, allowed)
        return allowed

    def _log(self, action: str, user: AppUser, target_id: int, allowed: bool) -> None:
        logger.debug(
            "Authorization decision",
            action=action,
            uid=user.firebase_uid,
            role=user.role.value,
            target_id=target_id,
            allowed=allowed,
        )


permission_evaluator = PermissionEvaluator()


def ensure_role(user: AppUser, allowed: frozenset[Role] | set[Role], message: str = "Forbidden") -> None:
    """Raise ForbiddenError unless the user's role is one of ``allowed``"""
    if user.role not in allowed:
        logger.warning("Role not allowed", uid=user.firebase_uid, role=user.role.value, message=message)
        raise ForbiddenError(message)
