"""
Admin Group and Role Endpoints
"""

from typing import Any, List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from floortrack.core.database import get_db
from floortrack.core.deps import get_current_user
from floortrack.core.identifiers import IdIn
from floortrack.schemas.access import GroupCreate, GroupResponse, GroupUpdate, RoleResponse
from floortrack.schemas.base import OkResponse
from floortrack.services.access import group_service, role_service
from floortrack.services.identity import AppUser

router = APIRouter()
roles_router = APIRouter()


@roles_router.get("", response_model=List[RoleResponse])
async def list_roles(
    db: AsyncSession = Depends(get_db),
    current_user: AppUser = Depends(get_current_user),
) -> Any:
    return await role_service.list_roles(db, current_user)


@router.get("", response_model=List[GroupResponse])
async def list_groups(
    db: AsyncSession = Depends(get_db),
    current_user: AppUser = Depends(get_current_user),
) -> Any:
    return await group_service.list_groups(db, current_user)


@router.post("", response_model=GroupResponse)
async def create_group(
    data: GroupCreate,
    db: AsyncSession = Depends(get_db),
    current_user: AppUser = Depends(get_current_user),
) -> Any:
    return await group_service.create_group(db, current_user, data)


@router.put("/{group_id}", response_model=GroupResponse)
async def update_group(
    group_id: IdIn,
    data: GroupUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: AppUser = Depends(get_current_user),
) -> Any:
    return await group_service.update_group(db, current_user, group_id, data)


@router.delete("/{group_id}", response_model=OkResponse)
async def delete_group(
    group_id: IdIn,
    db: AsyncSession = Depends(get_db),
    current_user: AppUser = Depends(get_current_user),
) -> Any:
    await group_service.delete_group(db, current_user, group_id)
    return OkResponse()
