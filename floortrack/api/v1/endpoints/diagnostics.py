"""
Diagnostics Endpoint
"""

from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from floortrack.core.database import get_db
from floortrack.core.deps import get_session_identity
from floortrack.schemas.base import DiagnosticsResponse
from floortrack.services.identity_provider import IdentityRecord

router = APIRouter()
logger = structlog.get_logger()


@router.get("/diag", response_model=DiagnosticsResponse)
async def diagnostics(
    db: AsyncSession = Depends(get_db),
    identity: IdentityRecord = Depends(get_session_identity),
) -> Any:
    """Round trip to the database on behalf of a verified session"""
    db_time = (await db.execute(select(func.now()))).scalar_one()
    logger.info("Diagnostics OK")
    return DiagnosticsResponse(uid=identity.uid, db=db_time)
