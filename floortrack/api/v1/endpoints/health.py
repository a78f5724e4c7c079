"""
Health Check Endpoint
"""

import time

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from floortrack import __version__
from floortrack.core.database import check_database_health

router = APIRouter()


@router.get("/health")
async def health_check():
    """Database connectivity; 503 when the database is unreachable"""
    healthy = await check_database_health()
    content = {
        "status": "healthy" if healthy else "unhealthy",
        "service": "floortrack-api",
        "version": __version__,
        "timestamp": time.time(),
        "database": "connected" if healthy else "unreachable",
    }
    return JSONResponse(status_code=200 if healthy else 503, content=content)
