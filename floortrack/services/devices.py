"""
Device Services
Admin CRUD for network client devices and self-service registered devices
"""

from __future__ import annotations

from typing import Any

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from floortrack.core.database import atomic
from floortrack.core.errors import ForbiddenError, InvalidArgumentError, NotFoundError
from floortrack.core.identifiers import normalize_mac
from floortrack.core.permissions import permission_evaluator
from floortrack.models.device import ClientDevice, UserOwnedDevice
from floortrack.repositories.building import access_point_repository
from floortrack.repositories.device import client_device_repository, user_device_repository
from floortrack.schemas.device import (
    ClientDeviceCreate,
    ClientDeviceCreated,
    ClientDeviceListItem,
    ClientDeviceUpdate,
    ClientDeviceUpdated,
    OwnedDeviceCreate,
    OwnedDeviceResponse,
    OwnedDeviceUpdate,
)
from floortrack.services.identity import AppUser
from floortrack.services.scoping import resource_scoping_service

logger = structlog.get_logger()

DUPLICATE_MAC = "MAC already exists"


class ClientDeviceService:
    async def list_devices(self, db: AsyncSession, user: AppUser) -> list[ClientDeviceListItem]:
        devices = await resource_scoping_service.list_client_devices(db, user)
        return [
            ClientDeviceListItem(
                id=d.id,
                mac=d.mac,
                ap_id=d.ap_id,
                floor_id=d.access_point.floor_id,
                building_id=d.access_point.floor.building_id,
                created_at=d.created_at,
            )
            for d in devices
        ]

    async def _floor_of_ap(self, db: AsyncSession, ap_id: int) -> int:
        ap = await access_point_repository.get(db, ap_id)
        if ap is None:
            raise NotFoundError("AP not found")
        return ap.floor_id

    async def _require_floor_access(self, db: AsyncSession, user: AppUser, floor_id: int, message: str = "Forbidden") -> None:
        if not await permission_evaluator.can_manage_floor(db, user, floor_id):
            logger.warning("Device change forbidden: cannot manage floor", uid=user.firebase_uid, floor_id=floor_id)
            raise ForbiddenError(message)

    async def create_device(self, db: AsyncSession, user: AppUser, data: ClientDeviceCreate) -> ClientDeviceCreated:
        floor_id = await self._floor_of_ap(db, data.ap_id)
        await self._require_floor_access(db, user, floor_id)

        async with atomic(db, DUPLICATE_MAC):
            device = await client_device_repository.create(
                db, obj_in={"mac": normalize_mac(data.mac), "ap_id": data.ap_id}, commit=False
            )
        logger.info("Client device created", device_id=device.id, ap_id=data.ap_id, uid=user.firebase_uid)
        return ClientDeviceCreated.model_validate(device)

    async def update_device(
        self, db: AsyncSession, user: AppUser, device_id: int, data: ClientDeviceUpdate
    ) -> ClientDeviceUpdated:
        device: ClientDevice = await client_device_repository.get_with_access_point(db, device_id)
        if device is None:
            raise NotFoundError("Device not found")
        await self._require_floor_access(db, user, device.access_point.floor_id)

        changes: dict[str, Any] = {}
        floor_id = device.access_point.floor_id
        if data.mac is not None:
            changes["mac"] = normalize_mac(data.mac)
        if data.ap_id is not None:
            floor_id = await self._floor_of_ap(db, data.ap_id)
            await self._require_floor_access(db, user, floor_id, "Forbidden for target floor")
            changes["ap_id"] = data.ap_id

        if not changes:
            raise InvalidArgumentError("No valid fields to update")

        async with atomic(db, DUPLICATE_MAC):
            device = await client_device_repository.update(db, db_obj=device, obj_in=changes, commit=False)
        logger.info("Client device updated", device_id=device_id, fields=sorted(changes), uid=user.firebase_uid)
        return ClientDeviceUpdated(id=device.id, mac=device.mac, ap_id=device.ap_id, floor_id=floor_id)

    async def delete_device(self, db: AsyncSession, user: AppUser, device_id: int) -> None:
        device: ClientDevice = await client_device_repository.get_with_access_point(db, device_id)
        if device is None:
            raise NotFoundError("Device not found")
        await self._require_floor_access(db, user, device.access_point.floor_id)

        await client_device_repository.remove(db, db_obj=device)
        logger.warning("Client device deleted", device_id=device_id, uid=user.firebase_uid)


class OwnedDeviceService:
    """Devices a user registers for themselves; only the owner may touch them"""

    async def list_devices(self, db: AsyncSession, user: AppUser) -> list[OwnedDeviceResponse]:
        devices = await user_device_repository.list_for_user(db, user.id)
        return [OwnedDeviceResponse.model_validate(d) for d in devices]

    async def _owned(self, db: AsyncSession, user: AppUser, device_id: int) -> UserOwnedDevice:
        device = await user_device_repository.get(db, device_id)
        if device is None:
            raise NotFoundError("Device not found")
        if device.user_id != user.id:
            logger.warning("Owned device access forbidden: not owner", uid=user.firebase_uid, device_id=device_id)
            raise ForbiddenError()
        return device

    async def get_device(self, db: AsyncSession, user: AppUser, device_id: int) -> OwnedDeviceResponse:
        return OwnedDeviceResponse.model_validate(await self._owned(db, user, device_id))

    async def create_device(self, db: AsyncSession, user: AppUser, data: OwnedDeviceCreate) -> OwnedDeviceResponse:
        async with atomic(db, DUPLICATE_MAC):
            device = await user_device_repository.create(
                db,
                obj_in={"name": data.name, "mac": normalize_mac(data.mac), "user_id": user.id},
                commit=False,
            )
        logger.info("Owned device registered", device_id=device.id, uid=user.firebase_uid)
        return OwnedDeviceResponse.model_validate(device)

    async def update_device(
        self, db: AsyncSession, user: AppUser, device_id: int, data: OwnedDeviceUpdate
    ) -> OwnedDeviceResponse:
        device = await self._owned(db, user, device_id)
        changes = data.model_dump(exclude_none=True)
        if "mac" in changes:
            changes["mac"] = normalize_mac(changes["mac"])

        async with atomic(db, DUPLICATE_MAC):
            device = await user_device_repository.update(db, db_obj=device, obj_in=changes, commit=False)
        return OwnedDeviceResponse.model_validate(device)

    async def delete_device(self, db: AsyncSession, user: AppUser, device_id: int) -> None:
        device = await self._owned(db, user, device_id)
        await user_device_repository.remove(db, db_obj=device)
        logger.warning("Owned device deleted", device_id=device_id, uid=user.firebase_uid)


client_device_service = ClientDeviceService()
owned_device_service = OwnedDeviceService()
