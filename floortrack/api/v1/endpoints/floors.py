"""
Floor Endpoints
Browsable floor list and strict floor-scoped reads
"""

from typing import Any, List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from floortrack.core.database import get_db
from floortrack.core.deps import get_current_user
from floortrack.core.identifiers import IdIn
from floortrack.schemas.location import BuildingResponse, FloorDetail, FloorListItem
from floortrack.services.floor_reads import floor_read_service
from floortrack.services.identity import AppUser

router = APIRouter()


@router.get("", response_model=List[FloorListItem])
async def list_floors(
    db: AsyncSession = Depends(get_db),
    current_user: AppUser = Depends(get_current_user),
) -> Any:
    """Floors the caller may browse; Viewers included"""
    return await floor_read_service.list_floors(db, current_user)


@router.get("/{floor_id}", response_model=FloorDetail)
async def get_floor(
    floor_id: IdIn,
    db: AsyncSession = Depends(get_db),
    current_user: AppUser = Depends(get_current_user),
) -> Any:
    """
    Floor detail with its SVG map

    Non-owners need a grant naming this exact floor; a grant on the
    building alone is not enough.
    """
    return await floor_read_service.get_floor(db, current_user, floor_id)


@router.get("/{floor_id}/building", response_model=BuildingResponse)
async def get_floor_building(
    floor_id: IdIn,
    db: AsyncSession = Depends(get_db),
    current_user: AppUser = Depends(get_current_user),
) -> Any:
    return await floor_read_service.get_floor_building(db, current_user, floor_id)
