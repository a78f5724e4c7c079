"""
Admin Client Device Endpoints
"""

from typing import Any, List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from floortrack.core.database import get_db
from floortrack.core.deps import get_current_user
from floortrack.core.identifiers import IdIn
from floortrack.schemas.base import OkResponse
from floortrack.schemas.device import (
    ClientDeviceCreate,
    ClientDeviceCreated,
    ClientDeviceListItem,
    ClientDeviceUpdate,
    ClientDeviceUpdated,
)
from floortrack.services.devices import client_device_service
from floortrack.services.identity import AppUser

router = APIRouter()


@router.get("", response_model=List[ClientDeviceListItem])
async def list_devices(
    db: AsyncSession = Depends(get_db),
    current_user: AppUser = Depends(get_current_user),
) -> Any:
    return await client_device_service.list_devices(db, current_user)


@router.post("", response_model=ClientDeviceCreated)
async def create_device(
    data: ClientDeviceCreate,
    db: AsyncSession = Depends(get_db),
    current_user: AppUser = Depends(get_current_user),
) -> Any:
    return await client_device_service.create_device(db, current_user, data)


@router.put("/{device_id}", response_model=ClientDeviceUpdated)
async def update_device(
    device_id: IdIn,
    data: ClientDeviceUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: AppUser = Depends(get_current_user),
) -> Any:
    """
    Change a device's MAC or move it to another AP

    Moving requires management rights on both the current and the
    target floor.
    """
    return await client_device_service.update_device(db, current_user, device_id, data)


@router.delete("/{device_id}", response_model=OkResponse)
async def delete_device(
    device_id: IdIn,
    db: AsyncSession = Depends(get_db),
    current_user: AppUser = Depends(get_current_user),
) -> Any:
    await client_device_service.delete_device(db, current_user, device_id)
    return OkResponse()
