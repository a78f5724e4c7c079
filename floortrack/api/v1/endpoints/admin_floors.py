"""
Admin Floor Endpoints
"""

from typing import Any, List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from floortrack.core.database import get_db
from floortrack.core.deps import get_current_user
from floortrack.core.identifiers import IdIn
from floortrack.schemas.base import OkResponse
from floortrack.schemas.location import FloorCreate, FloorCreated, FloorListItem, FloorUpdate, FloorUpdated
from floortrack.services.identity import AppUser
from floortrack.services.locations import floor_service

router = APIRouter()


@router.get("", response_model=List[FloorListItem])
async def list_floors(
    db: AsyncSession = Depends(get_db),
    current_user: AppUser = Depends(get_current_user),
) -> Any:
    return await floor_service.list_floors(db, current_user)


@router.post("", response_model=FloorCreated)
async def create_floor(
    data: FloorCreate,
    db: AsyncSession = Depends(get_db),
    current_user: AppUser = Depends(get_current_user),
) -> Any:
    """
    Create a floor in a building

    When the caller belongs to a group, a grant binding the new floor to
    their first group is written in the same transaction.
    """
    return await floor_service.create_floor(db, current_user, data)


@router.put("/{floor_id}", response_model=FloorUpdated)
async def update_floor(
    floor_id: IdIn,
    data: FloorUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: AppUser = Depends(get_current_user),
) -> Any:
    return await floor_service.update_floor(db, current_user, floor_id, data)


@router.delete("/{floor_id}", response_model=OkResponse)
async def delete_floor(
    floor_id: IdIn,
    db: AsyncSession = Depends(get_db),
    current_user: AppUser = Depends(get_current_user),
) -> Any:
    await floor_service.delete_floor(db, current_user, floor_id)
    return OkResponse()
