"""
Location Services
Admin CRUD for buildings, floors and access points
"""

from __future__ import annotations

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from floortrack.core.database import atomic
from floortrack.core.errors import ConflictError, ForbiddenError, NotFoundError
from floortrack.core.permissions import ensure_role, permission_evaluator
from floortrack.core.roles import FLOOR_CREATE_SCOPE, FLOOR_EDIT_SCOPE, OWNER_ONLY, Scope
from floortrack.models.building import AccessPoint, Floor
from floortrack.repositories.building import (
    access_point_repository,
    building_repository,
    floor_repository,
)
from floortrack.repositories.device import client_device_repository
from floortrack.repositories.global_permission import global_permission_repository
from floortrack.schemas.location import (
    AccessPointCreate,
    AccessPointListItem,
    AccessPointSummary,
    AccessPointUpdate,
    BuildingCreate,
    BuildingResponse,
    BuildingUpdate,
    FloorCreate,
    FloorCreated,
    FloorListItem,
    FloorUpdate,
    FloorUpdated,
)
from floortrack.services.identity import AppUser
from floortrack.services.mutations import mutation_coordinator
from floortrack.services.scoping import resource_scoping_service

logger = structlog.get_logger()


async def _get_or_404(repository, db: AsyncSession, id: int, message: str):
    record = await repository.get(db, id)
    if record is None:
        raise NotFoundError(message)
    return record


class BuildingService:
    async def list_buildings(self, db: AsyncSession, user: AppUser) -> list[BuildingResponse]:
        buildings = await resource_scoping_service.list_buildings(db, user)
        return [BuildingResponse.model_validate(b) for b in buildings]

    async def create_building(self, db: AsyncSession, user: AppUser, data: BuildingCreate) -> BuildingResponse:
        ensure_role(user, OWNER_ONLY, "Only Owner can create buildings")
        building = await building_repository.create(db, obj_in={"name": data.name})
        logger.info("Building created", building_id=building.id, uid=user.firebase_uid)
        return BuildingResponse.model_validate(building)

    async def update_building(
        self, db: AsyncSession, user: AppUser, building_id: int, data: BuildingUpdate
    ) -> BuildingResponse:
        ensure_role(user, OWNER_ONLY, "Only Owner can edit buildings")
        building = await _get_or_404(building_repository, db, building_id, "Building not found")
        building = await building_repository.update(db, db_obj=building, obj_in={"name": data.name})
        return BuildingResponse.model_validate(building)

    async def delete_building(self, db: AsyncSession, user: AppUser, building_id: int) -> None:
        ensure_role(user, OWNER_ONLY, "Only Owner can delete buildings")
        building = await _get_or_404(building_repository, db, building_id, "Building not found")
        if await floor_repository.exists(db, filters={"building_id": building_id}):
            raise ConflictError("Building has floors; delete them first")

        async with atomic(db):
            await global_permission_repository.delete_where(db, filters={"building_id": building_id})
            await building_repository.remove(db, db_obj=building, commit=False)
        logger.warning("Building deleted", building_id=building_id, uid=user.firebase_uid)


class FloorService:
    def _list_item(self, floor: Floor) -> FloorListItem:
        return FloorListItem(
            id=floor.id,
            name=floor.name,
            building_id=floor.building_id,
            building_name=floor.building.name if floor.building else None,
        )

    async def list_floors(self, db: AsyncSession, user: AppUser) -> list[FloorListItem]:
        floors = await resource_scoping_service.list_floors(db, user)
        return [self._list_item(f) for f in floors]

    async def create_floor(self, db: AsyncSession, user: AppUser, data: FloorCreate) -> FloorCreated:
        scope = FLOOR_CREATE_SCOPE[user.role]
        if scope is Scope.NONE:
            logger.warning("Create floor forbidden: role not allowed", uid=user.firebase_uid, role=user.role.value)
            raise ForbiddenError("Your role cannot create floors")

        await _get_or_404(building_repository, db, data.building_id, "Building not found")
        if scope is Scope.BUILDING and not await permission_evaluator.can_manage_building(
            db, user, data.building_id
        ):
            logger.warning("Create floor forbidden: building not in scope", uid=user.firebase_uid, building_id=data.building_id)
            raise ForbiddenError("Forbidden for building")

        floor = await mutation_coordinator.create_floor(
            db, user, name=data.name, svg_map=data.svg_map, building_id=data.building_id
        )
        return FloorCreated.model_validate(floor)

    async def _editable_floor(self, db: AsyncSession, user: AppUser, floor_id: int) -> Floor:
        if FLOOR_EDIT_SCOPE[user.role] is Scope.NONE:
            logger.warning("Floor edit forbidden: role not allowed", uid=user.firebase_uid, role=user.role.value)
            raise ForbiddenError("Your role cannot edit floors")

        floor = await _get_or_404(floor_repository, db, floor_id, "Floor not found")
        if not await permission_evaluator.can_manage_floor(db, user, floor_id):
            logger.warning("Floor edit forbidden: not scoped", uid=user.firebase_uid, floor_id=floor_id)
            raise ForbiddenError()
        return floor

    async def update_floor(self, db: AsyncSession, user: AppUser, floor_id: int, data: FloorUpdate) -> FloorUpdated:
        floor = await self._editable_floor(db, user, floor_id)
        changes = data.model_dump(exclude_none=True)
        if changes:
            floor = await floor_repository.update(db, db_obj=floor, obj_in=changes)
        return FloorUpdated.model_validate(floor)

    async def delete_floor(self, db: AsyncSession, user: AppUser, floor_id: int) -> None:
        floor = await self._editable_floor(db, user, floor_id)
        if await access_point_repository.exists(db, filters={"floor_id": floor_id}):
            raise ConflictError("Floor has access points; delete them first")

        async with atomic(db):
            await global_permission_repository.delete_where(db, filters={"floor_id": floor_id})
            await floor_repository.remove(db, db_obj=floor, commit=False)
        logger.warning("Floor deleted", floor_id=floor_id, uid=user.firebase_uid)


class AccessPointService:
    async def list_access_points(self, db: AsyncSession, user: AppUser) -> list[AccessPointListItem]:
        aps = await resource_scoping_service.list_access_points(db, user)
        return [
            AccessPointListItem(
                id=ap.id,
                name=ap.name,
                cx=ap.cx,
                cy=ap.cy,
                floor_id=ap.floor_id,
                building_id=ap.floor.building_id,
            )
            for ap in aps
        ]

    async def _require_floor_access(self, db: AsyncSession, user: AppUser, floor_id: int, message: str = "Forbidden") -> None:
        if not await permission_evaluator.can_manage_floor(db, user, floor_id):
            logger.warning("Access point change forbidden: cannot manage floor", uid=user.firebase_uid, floor_id=floor_id)
            raise ForbiddenError(message)

    async def create_access_point(
        self, db: AsyncSession, user: AppUser, data: AccessPointCreate
    ) -> AccessPointSummary:
        await _get_or_404(floor_repository, db, data.floor_id, "Floor not found")
        await self._require_floor_access(db, user, data.floor_id, "Forbidden for floor")

        ap = await access_point_repository.create(
            db, obj_in={"name": data.name, "cx": data.cx, "cy": data.cy, "floor_id": data.floor_id}
        )
        logger.info("Access point created", ap_id=ap.id, floor_id=ap.floor_id, uid=user.firebase_uid)
        return AccessPointSummary.model_validate(ap)

    async def update_access_point(
        self, db: AsyncSession, user: AppUser, ap_id: int, data: AccessPointUpdate
    ) -> AccessPointSummary:
        ap: AccessPoint = await _get_or_404(access_point_repository, db, ap_id, "AP not found")
        await self._require_floor_access(db, user, ap.floor_id)

        changes = data.model_dump(exclude_none=True)
        if changes:
            ap = await access_point_repository.update(db, db_obj=ap, obj_in=changes)
        return AccessPointSummary.model_validate(ap)

    async def delete_access_point(self, db: AsyncSession, user: AppUser, ap_id: int) -> None:
        ap: AccessPoint = await _get_or_404(access_point_repository, db, ap_id, "AP not found")
        await self._require_floor_access(db, user, ap.floor_id)
        if await client_device_repository.exists(db, filters={"ap_id": ap_id}):
            raise ConflictError("AP has client devices; delete or move them first")

        await access_point_repository.remove(db, db_obj=ap)
        logger.warning("Access point deleted", ap_id=ap_id, uid=user.firebase_uid)


building_service = BuildingService()
floor_service = FloorService()
access_point_service = AccessPointService()
