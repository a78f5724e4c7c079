"""
Profile Endpoints
Self-service profile, owned devices and account deletion
"""

from typing import Any, List

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from floortrack.api.v1.endpoints.auth import clear_session_cookie
from floortrack.core.database import get_db
from floortrack.core.deps import get_current_user, get_session_identity
from floortrack.core.identifiers import IdIn
from floortrack.schemas.base import OkResponse
from floortrack.schemas.device import OwnedDeviceCreate, OwnedDeviceResponse, OwnedDeviceUpdate
from floortrack.schemas.profile import ProfileResponse, ProfileUpdate, ProfileUpdated
from floortrack.services.devices import owned_device_service
from floortrack.services.identity import AppUser
from floortrack.services.identity_provider import IdentityProvider, IdentityRecord, get_identity_provider
from floortrack.services.profile import profile_service

router = APIRouter()


@router.get("", response_model=ProfileResponse)
async def get_profile(
    db: AsyncSession = Depends(get_db),
    current_user: AppUser = Depends(get_current_user),
) -> Any:
    return await profile_service.get_profile(db, current_user)


@router.put("", response_model=ProfileUpdated)
async def update_profile(
    data: ProfileUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: AppUser = Depends(get_current_user),
) -> Any:
    return await profile_service.update_profile(db, current_user, data)


@router.delete("", response_model=OkResponse)
async def delete_account(
    response: Response,
    db: AsyncSession = Depends(get_db),
    identity: IdentityRecord = Depends(get_session_identity),
    provider: IdentityProvider = Depends(get_identity_provider),
) -> Any:
    """
    Delete the caller's account

    Works from a verified session alone, so an identity whose
    application user is already gone can still be removed.
    """
    await profile_service.delete_account(db, provider, identity.uid, identity.id_token)
    clear_session_cookie(response)
    return OkResponse()


@router.get("/devices", response_model=List[OwnedDeviceResponse])
async def list_devices(
    db: AsyncSession = Depends(get_db),
    current_user: AppUser = Depends(get_current_user),
) -> Any:
    return await owned_device_service.list_devices(db, current_user)


@router.post("/devices", response_model=OwnedDeviceResponse)
async def create_device(
    data: OwnedDeviceCreate,
    db: AsyncSession = Depends(get_db),
    current_user: AppUser = Depends(get_current_user),
) -> Any:
    return await owned_device_service.create_device(db, current_user, data)


@router.get("/devices/{device_id}", response_model=OwnedDeviceResponse)
async def get_device(
    device_id: IdIn,
    db: AsyncSession = Depends(get_db),
    current_user: AppUser = Depends(get_current_user),
) -> Any:
    return await owned_device_service.get_device(db, current_user, device_id)


@router.put("/devices/{device_id}", response_model=OwnedDeviceResponse)
async def update_device(
    device_id: IdIn,
    data: OwnedDeviceUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: AppUser = Depends(get_current_user),
) -> Any:
    return await owned_device_service.update_device(db, current_user, device_id, data)


@router.delete("/devices/{device_id}", response_model=OkResponse)
async def delete_device(
    device_id: IdIn,
    db: AsyncSession = Depends(get_db),
    current_user: AppUser = Depends(get_current_user),
) -> Any:
    await owned_device_service.delete_device(db, current_user, device_id)
    return OkResponse()
