"""
Admin Building Endpoints
"""

from typing import Any, List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from floortrack.core.database import get_db
from floortrack.core.deps import get_current_user
from floortrack.core.identifiers import IdIn
from floortrack.schemas.base import OkResponse
from floortrack.schemas.location import BuildingCreate, BuildingResponse, BuildingUpdate
from floortrack.services.identity import AppUser
from floortrack.services.locations import building_service

router = APIRouter()


@router.get("", response_model=List[BuildingResponse])
async def list_buildings(
    db: AsyncSession = Depends(get_db),
    current_user: AppUser = Depends(get_current_user),
) -> Any:
    """
    List buildings visible to the caller

    Owners see every building; admins see buildings their groups hold a
    grant on; other roles get an empty list.
    """
    return await building_service.list_buildings(db, current_user)


@router.post("", response_model=BuildingResponse)
async def create_building(
    data: BuildingCreate,
    db: AsyncSession = Depends(get_db),
    current_user: AppUser = Depends(get_current_user),
) -> Any:
    return await building_service.create_building(db, current_user, data)


@router.put("/{building_id}", response_model=BuildingResponse)
async def update_building(
    building_id: IdIn,
    data: BuildingUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: AppUser = Depends(get_current_user),
) -> Any:
    return await building_service.update_building(db, current_user, building_id, data)


@router.delete("/{building_id}", response_model=OkResponse)
async def delete_building(
    building_id: IdIn,
    db: AsyncSession = Depends(get_db),
    current_user: AppUser = Depends(get_current_user),
) -> Any:
    """Delete an empty building; a building that still has floors is rejected with 409"""
    await building_service.delete_building(db, current_user, building_id)
    return OkResponse()
