"""
User Endpoints
"""

from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from floortrack.core.database import get_db
from floortrack.core.deps import get_session_identity
from floortrack.core.identifiers import IdIn
from floortrack.schemas.profile import ApConnectionsResponse
from floortrack.services.identity_provider import IdentityRecord
from floortrack.services.profile import profile_service

router = APIRouter()


@router.get("/{user_id}/ap-connection", response_model=ApConnectionsResponse)
async def ap_connection(
    user_id: IdIn,
    db: AsyncSession = Depends(get_db),
    identity: IdentityRecord = Depends(get_session_identity),
) -> Any:
    """
    Last AP each of the user's registered MACs was seen on

    Only the user themselves may ask.
    """
    return await profile_service.ap_connections(db, identity.uid, user_id)
