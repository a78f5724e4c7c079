"""
Access Management Services
Roles, groups, GlobalPermission grants and pending-user assignment
"""

from __future__ import annotations

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from floortrack.core.database import atomic
from floortrack.core.errors import ConflictError, ForbiddenError, InvalidArgumentError, NotFoundError
from floortrack.core.permissions import ensure_role
from floortrack.core.roles import ADMIN_ROLES, GRANT_ADMIN_SCOPE, OWNER_ONLY, PENDING_ROLE_ID, Scope
from floortrack.models.global_permission import GlobalPermission
from floortrack.repositories.building import building_repository, floor_repository
from floortrack.repositories.global_permission import global_permission_repository
from floortrack.repositories.group import group_repository
from floortrack.repositories.role import role_repository
from floortrack.repositories.user import user_group_repository, user_repository
from floortrack.schemas.access import (
    AssignPendingUserRequest,
    GlobalPermissionCreate,
    GlobalPermissionResponse,
    GlobalPermissionUpdate,
    GroupCreate,
    GroupResponse,
    GroupUpdate,
    PendingUserResponse,
    RoleResponse,
)
from floortrack.services.identity import AppUser
from floortrack.services.mutations import mutation_coordinator

logger = structlog.get_logger()

DUPLICATE_GROUP = "Group already exists"
DUPLICATE_GRANT = "GlobalPermission already exists"


class RoleService:
    async def list_roles(self, db: AsyncSession, user: AppUser) -> list[RoleResponse]:
        ensure_role(user, ADMIN_ROLES)
        roles = await role_repository.get_multi(db)
        return [RoleResponse.model_validate(r) for r in roles]


class GroupService:
    async def list_groups(self, db: AsyncSession, user: AppUser) -> list[GroupResponse]:
        ensure_role(user, ADMIN_ROLES)
        groups = await group_repository.get_multi(db)
        return [GroupResponse.model_validate(g) for g in groups]

    async def create_group(self, db: AsyncSession, user: AppUser, data: GroupCreate) -> GroupResponse:
        ensure_role(user, OWNER_ONLY, "Only Owner can manage groups")
        async with atomic(db, DUPLICATE_GROUP):
            group = await group_repository.create(db, obj_in={"name": data.name}, commit=False)
        logger.info("Group created", group_id=group.id, uid=user.firebase_uid)
        return GroupResponse.model_validate(group)

    async def update_group(self, db: AsyncSession, user: AppUser, group_id: int, data: GroupUpdate) -> GroupResponse:
        ensure_role(user, OWNER_ONLY, "Only Owner can manage groups")
        group = await group_repository.get(db, group_id)
        if group is None:
            raise NotFoundError("Group not found")

        async with atomic(db, DUPLICATE_GROUP):
            group = await group_repository.update(db, db_obj=group, obj_in={"name": data.name}, commit=False)
        return GroupResponse.model_validate(group)

    async def delete_group(self, db: AsyncSession, user: AppUser, group_id: int) -> None:
        ensure_role(user, OWNER_ONLY, "Only Owner can manage groups")
        group = await group_repository.get(db, group_id)
        if group is None:
            raise NotFoundError("Group not found")
        if await user_group_repository.group_is_used(db, group_id) or await global_permission_repository.exists(
            db, filters={"group_id": group_id}
        ):
            raise ConflictError("Group is still referenced by members or permissions")

        await group_repository.remove(db, db_obj=group)
        logger.warning("Group deleted", group_id=group_id, uid=user.firebase_uid)


class GlobalPermissionService:
    def _to_response(self, grant: GlobalPermission) -> GlobalPermissionResponse:
        return GlobalPermissionResponse(
            id=grant.id,
            group_id=grant.group_id,
            group_name=grant.group.name if grant.group else None,
            building_id=grant.building_id,
            building_name=grant.building.name if grant.building else None,
            floor_id=grant.floor_id,
            floor_name=grant.floor.name if grant.floor else None,
        )

    def _require_group_in_scope(self, user: AppUser, group_id: int) -> None:
        scope = GRANT_ADMIN_SCOPE[user.role]
        if scope is Scope.UNRESTRICTED:
            return
        if scope is Scope.OWN_GROUPS:
            if group_id not in user.group_ids:
                logger.warning("Grant change forbidden: group not in scope", uid=user.firebase_uid, group_id=group_id)
                raise ForbiddenError("Forbidden: group is not in your scope")
            return
        if scope is Scope.NONE:
            logger.warning("Grant change forbidden: role not allowed", uid=user.firebase_uid, role=user.role.value)
            raise ForbiddenError()
        raise AssertionError(f"Unhandled grant scope {scope}")

    async def _validate_references(self, db: AsyncSession, group_id: int, building_id: int, floor_id: int) -> None:
        """Group, building and floor must exist and the floor must sit in the building"""
        group = await group_repository.get(db, group_id)
        building = await building_repository.get(db, building_id)
        floor = await floor_repository.get(db, floor_id)
        if group is None or building is None or floor is None or floor.building_id != building_id:
            logger.warning(
                "Grant rejected: invalid references",
                group_id=group_id,
                building_id=building_id,
                floor_id=floor_id,
            )
            raise InvalidArgumentError("Invalid groupId/buildingId/floorId (or floor not in building)")

    async def list_grants(self, db: AsyncSession, user: AppUser) -> list[GlobalPermissionResponse]:
        scope = GRANT_ADMIN_SCOPE[user.role]
        if scope is Scope.UNRESTRICTED:
            grants = await global_permission_repository.list_detailed(db)
        elif scope is Scope.OWN_GROUPS:
            if not user.has_groups:
                return []
            grants = await global_permission_repository.list_detailed(db, user.group_ids)
        elif scope is Scope.NONE:
            logger.warning("Grant listing forbidden: role not allowed", uid=user.firebase_uid, role=user.role.value)
            raise ForbiddenError()
        else:
            raise AssertionError(f"Unhandled grant scope {scope}")
        return [self._to_response(g) for g in grants]

    async def create_grant(
        self, db: AsyncSession, user: AppUser, data: GlobalPermissionCreate
    ) -> GlobalPermissionResponse:
        await self._validate_references(db, data.group_id, data.building_id, data.floor_id)
        self._require_group_in_scope(user, data.group_id)

        async with atomic(db, DUPLICATE_GRANT):
            grant = await global_permission_repository.create(
                db,
                obj_in={"group_id": data.group_id, "building_id": data.building_id, "floor_id": data.floor_id},
                commit=False,
            )
        logger.info("GlobalPermission created", grant_id=grant.id, uid=user.firebase_uid)
        return self._to_response(await global_permission_repository.get_detailed(db, grant.id))

    async def update_grant(
        self, db: AsyncSession, user: AppUser, grant_id: int, data: GlobalPermissionUpdate
    ) -> GlobalPermissionResponse:
        grant = await self._existing(db, grant_id)
        self._require_group_in_scope(user, grant.group_id)

        group_id = data.group_id or grant.group_id
        building_id = data.building_id or grant.building_id
        floor_id = data.floor_id or grant.floor_id
        await self._validate_references(db, group_id, building_id, floor_id)
        self._require_group_in_scope(user, group_id)

        async with atomic(db, DUPLICATE_GRANT):
            await global_permission_repository.update(
                db,
                db_obj=grant,
                obj_in={"group_id": group_id, "building_id": building_id, "floor_id": floor_id},
                commit=False,
            )
        logger.info("GlobalPermission updated", grant_id=grant_id, uid=user.firebase_uid)
        return self._to_response(await global_permission_repository.get_detailed(db, grant_id))

    async def delete_grant(self, db: AsyncSession, user: AppUser, grant_id: int) -> None:
        grant = await self._existing(db, grant_id)
        self._require_group_in_scope(user, grant.group_id)

        await global_permission_repository.remove(db, db_obj=grant)
        logger.warning("GlobalPermission deleted", grant_id=grant_id, uid=user.firebase_uid)

    async def _existing(self, db: AsyncSession, grant_id: int) -> GlobalPermission:
        grant = await global_permission_repository.get(db, grant_id)
        if grant is None:
            raise NotFoundError("GlobalPermission not found")
        return grant


class PendingUserService:
    async def list_pending(self, db: AsyncSession, user: AppUser) -> list[PendingUserResponse]:
        ensure_role(user, OWNER_ONLY)
        pending = await user_repository.list_by_role(db, PENDING_ROLE_ID)
        return [PendingUserResponse.model_validate(u) for u in pending]

    async def assign(
        self, db: AsyncSession, user: AppUser, target_user_id: int, data: AssignPendingUserRequest
    ) -> None:
        ensure_role(user, OWNER_ONLY)

        target = await user_repository.get(db, target_user_id)
        if target is None:
            raise NotFoundError("User not found")
        if await role_repository.get(db, data.role_id) is None:
            raise NotFoundError("Role not found")
        groups = await group_repository.get_many(db, data.group_ids)
        missing = sorted(set(data.group_ids) - {g.id for g in groups})
        if missing:
            raise NotFoundError(f"Group not found: {', '.join(str(g) for g in missing)}")

        await mutation_coordinator.assign_pending_user(
            db, target, role_id=data.role_id, group_ids=data.group_ids
        )
        logger.info("Pending user assigned", target_user_id=target_user_id, uid=user.firebase_uid)


role_service = RoleService()
group_service = GroupService()
global_permission_service = GlobalPermissionService()
pending_user_service = PendingUserService()
