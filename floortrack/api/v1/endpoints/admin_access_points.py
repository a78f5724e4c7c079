"""
Admin Access Point Endpoints
"""

from typing import Any, List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from floortrack.core.database import get_db
from floortrack.core.deps import get_current_user
from floortrack.core.identifiers import IdIn
from floortrack.schemas.base import OkResponse
from floortrack.schemas.location import (
    AccessPointCreate,
    AccessPointListItem,
    AccessPointSummary,
    AccessPointUpdate,
)
from floortrack.services.identity import AppUser
from floortrack.services.locations import access_point_service

router = APIRouter()


@router.get("", response_model=List[AccessPointListItem])
async def list_access_points(
    db: AsyncSession = Depends(get_db),
    current_user: AppUser = Depends(get_current_user),
) -> Any:
    return await access_point_service.list_access_points(db, current_user)


@router.post("", response_model=AccessPointSummary)
async def create_access_point(
    data: AccessPointCreate,
    db: AsyncSession = Depends(get_db),
    current_user: AppUser = Depends(get_current_user),
) -> Any:
    return await access_point_service.create_access_point(db, current_user, data)


@router.put("/{ap_id}", response_model=AccessPointSummary)
async def update_access_point(
    ap_id: IdIn,
    data: AccessPointUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: AppUser = Depends(get_current_user),
) -> Any:
    return await access_point_service.update_access_point(db, current_user, ap_id, data)


@router.delete("/{ap_id}", response_model=OkResponse)
async def delete_access_point(
    ap_id: IdIn,
    db: AsyncSession = Depends(get_db),
    current_user: AppUser = Depends(get_current_user),
) -> Any:
    await access_point_service.delete_access_point(db, current_user, ap_id)
    return OkResponse()
