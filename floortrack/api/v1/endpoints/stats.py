"""
Floor Statistics Endpoints
"""

from typing import Any, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from floortrack.core.database import get_db
from floortrack.core.deps import get_current_user
from floortrack.core.errors import InvalidArgumentError
from floortrack.core.identifiers import parse_id
from floortrack.schemas.stats import DevicesByApResponse, TotalApsResponse, TotalDevicesResponse
from floortrack.services.floor_reads import floor_read_service
from floortrack.services.identity import AppUser

router = APIRouter()


def floor_id_query(floor_id: Optional[str] = Query(None, alias="floorId")) -> int:
    if not floor_id:
        raise InvalidArgumentError("floorId query param is required")
    return parse_id(floor_id, "floorId")


@router.get("/total-devices", response_model=TotalDevicesResponse)
async def total_devices(
    floor_id: int = Depends(floor_id_query),
    db: AsyncSession = Depends(get_db),
    current_user: AppUser = Depends(get_current_user),
) -> Any:
    return await floor_read_service.total_devices(db, current_user, floor_id)


@router.get("/total-aps", response_model=TotalApsResponse)
async def total_aps(
    floor_id: int = Depends(floor_id_query),
    db: AsyncSession = Depends(get_db),
    current_user: AppUser = Depends(get_current_user),
) -> Any:
    return await floor_read_service.total_aps(db, current_user, floor_id)


@router.get("/devices-by-ap", response_model=DevicesByApResponse)
async def devices_by_ap(
    floor_id: int = Depends(floor_id_query),
    db: AsyncSession = Depends(get_db),
    current_user: AppUser = Depends(get_current_user),
) -> Any:
    """Per-AP device counts on a floor, ascending AP id"""
    return await floor_read_service.devices_by_ap(db, current_user, floor_id)
