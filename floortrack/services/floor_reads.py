"""
Floor Read Service
Strict floor-scoped reads: floor detail, parent building and floor statistics
"""

from __future__ import annotations

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from floortrack.core.errors import ForbiddenError, NotFoundError
from floortrack.core.permissions import permission_evaluator
from floortrack.models.building import Floor
from floortrack.repositories.building import access_point_repository, floor_repository
from floortrack.repositories.device import client_device_repository
from floortrack.schemas.location import BuildingResponse, FloorDetail, FloorListItem
from floortrack.schemas.stats import (
    ApDeviceCount,
    DevicesByApResponse,
    TotalApsResponse,
    TotalDevicesResponse,
)
from floortrack.services.identity import AppUser
from floortrack.services.scoping import resource_scoping_service

logger = structlog.get_logger()


class FloorReadService:
    async def _authorize(self, db: AsyncSession, user: AppUser, floor_id: int) -> None:
        if not await permission_evaluator.can_read_floor(db, user, floor_id):
            logger.warning("Floor read forbidden", uid=user.firebase_uid, floor_id=floor_id)
            raise ForbiddenError()

    async def _readable_floor(self, db: AsyncSession, user: AppUser, floor_id: int) -> Floor:
        await self._authorize(db, user, floor_id)
        floor = await floor_repository.get_with_building(db, floor_id)
        if floor is None:
            raise NotFoundError("Floor not found")
        return floor

    async def list_floors(self, db: AsyncSession, user: AppUser) -> list[FloorListItem]:
        floors = await resource_scoping_service.list_browsable_floors(db, user)
        return [
            FloorListItem(
                id=f.id,
                name=f.name,
                building_id=f.building_id,
                building_name=f.building.name if f.building else None,
            )
            for f in floors
        ]

    async def get_floor(self, db: AsyncSession, user: AppUser, floor_id: int) -> FloorDetail:
        floor = await self._readable_floor(db, user, floor_id)
        return FloorDetail.model_validate(floor)

    async def get_floor_building(self, db: AsyncSession, user: AppUser, floor_id: int) -> BuildingResponse:
        floor = await self._readable_floor(db, user, floor_id)
        if floor.building is None:
            raise NotFoundError("Building not found")
        return BuildingResponse.model_validate(floor.building)

    async def total_devices(self, db: AsyncSession, user: AppUser, floor_id: int) -> TotalDevicesResponse:
        await self._authorize(db, user, floor_id)
        total = await client_device_repository.count_on_floor(db, floor_id)
        return TotalDevicesResponse(floor_id=floor_id, total_devices=total)

    async def total_aps(self, db: AsyncSession, user: AppUser, floor_id: int) -> TotalApsResponse:
        await self._authorize(db, user, floor_id)
        total = await access_point_repository.count(db, filters={"floor_id": floor_id})
        return TotalApsResponse(floor_id=floor_id, total_aps=total)

    async def devices_by_ap(self, db: AsyncSession, user: AppUser, floor_id: int) -> DevicesByApResponse:
        await self._authorize(db, user, floor_id)
        rows = await access_point_repository.device_counts_for_floor(db, floor_id)
        return DevicesByApResponse(
            floor_id=floor_id,
            aps=[
                ApDeviceCount(ap_id=ap.id, title=ap.name, cx=ap.cx, cy=ap.cy, device_count=count)
                for ap, count in rows
            ],
        )


floor_read_service = FloorReadService()
