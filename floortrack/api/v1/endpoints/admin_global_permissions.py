"""
Admin GlobalPermission Endpoints
Grants binding a group to a floor within a building
"""

from typing import Any, List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from floortrack.core.database import get_db
from floortrack.core.deps import get_current_user
from floortrack.core.identifiers import IdIn
from floortrack.schemas.access import (
    GlobalPermissionCreate,
    GlobalPermissionResponse,
    GlobalPermissionUpdate,
)
from floortrack.schemas.base import OkResponse
from floortrack.services.access import global_permission_service
from floortrack.services.identity import AppUser

router = APIRouter()


@router.get("", response_model=List[GlobalPermissionResponse])
async def list_global_permissions(
    db: AsyncSession = Depends(get_db),
    current_user: AppUser = Depends(get_current_user),
) -> Any:
    return await global_permission_service.list_grants(db, current_user)


@router.post("", response_model=GlobalPermissionResponse)
async def create_global_permission(
    data: GlobalPermissionCreate,
    db: AsyncSession = Depends(get_db),
    current_user: AppUser = Depends(get_current_user),
) -> Any:
    """
    Grant a group access to a floor

    The floor must belong to the given building. Organization Admins may
    only grant to groups they belong to.
    """
    return await global_permission_service.create_grant(db, current_user, data)


@router.put("/{grant_id}", response_model=GlobalPermissionResponse)
async def update_global_permission(
    grant_id: IdIn,
    data: GlobalPermissionUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: AppUser = Depends(get_current_user),
) -> Any:
    return await global_permission_service.update_grant(db, current_user, grant_id, data)


@router.delete("/{grant_id}", response_model=OkResponse)
async def delete_global_permission(
    grant_id: IdIn,
    db: AsyncSession = Depends(get_db),
    current_user: AppUser = Depends(get_current_user),
) -> Any:
    await global_permission_service.delete_grant(db, current_user, grant_id)
    return OkResponse()
