"""
Admin Pending User Endpoints
"""

from typing import Any, List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from floortrack.core.database import get_db
from floortrack.core.deps import get_current_user
from floortrack.core.identifiers import IdIn
from floortrack.schemas.access import AssignPendingUserRequest, PendingUserResponse
from floortrack.schemas.base import OkResponse
from floortrack.services.access import pending_user_service
from floortrack.services.identity import AppUser

router = APIRouter()


@router.get("", response_model=List[PendingUserResponse])
async def list_pending_users(
    db: AsyncSession = Depends(get_db),
    current_user: AppUser = Depends(get_current_user),
) -> Any:
    """Users still in the Pending User role, oldest registration first"""
    return await pending_user_service.list_pending(db, current_user)


@router.post("/{user_id}/assign", response_model=OkResponse)
async def assign_pending_user(
    user_id: IdIn,
    data: AssignPendingUserRequest,
    db: AsyncSession = Depends(get_db),
    current_user: AppUser = Depends(get_current_user),
) -> Any:
    """
    Give a user a role and replace their group memberships

    Role and memberships change together or not at all.
    """
    await pending_user_service.assign(db, current_user, user_id, data)
    return OkResponse()
