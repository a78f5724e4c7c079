"""
FastAPI Main Application
FloorTrack API Service
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import JSONResponse
import structlog

from floortrack import __version__
from floortrack.api.v1.endpoints import health
from floortrack.api.v1.router import api_router
from floortrack.core.config import settings
from floortrack.core.database import AsyncSessionLocal, close_database, init_database
from floortrack.core.errors import AppError
from floortrack.core.logging import setup_logging
from floortrack.middleware.logging import RequestContextMiddleware
from floortrack.middleware.security import SecurityHeadersMiddleware
from floortrack.schemas.base import ErrorResponse
from floortrack.services.bootstrap import ensure_reference_roles, promote_bootstrap_owner

setup_logging()
logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info("Starting FloorTrack API Service", version=__version__, environment=settings.ENVIRONMENT)

    if settings.DB_AUTO_CREATE:
        await init_database()

    async with AsyncSessionLocal() as session:
        await ensure_reference_roles(session)
        await promote_bootstrap_owner(session)

    yield

    logger.info("Shutting down FloorTrack API Service")
    await close_database()


app = FastAPI(
    title="FloorTrack API",
    description="Buildings, floors, access points and client devices with group-scoped access",
    version=__version__,
    docs_url="/docs" if settings.ENVIRONMENT == "development" else None,
    redoc_url=None,
    lifespan=lifespan,
)

# Middleware added last runs first: request ids wrap everything
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Accept", "X-Requested-With", "X-Request-ID", "Origin"],
    expose_headers=["X-Request-ID"],
    max_age=600,
)
app.add_middleware(RequestContextMiddleware)

if settings.is_production:
    app.add_middleware(TrustedHostMiddleware, allowed_hosts=settings.ALLOWED_HOSTS)

app.include_router(api_router, prefix="/api")
app.include_router(health.router)


@app.get("/")
async def root():
    return {"message": "FloorTrack API Service", "version": __version__, "health": "/health"}


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error("Request failed", path=request.url.path, error=exc.message, exc_info=exc)
    body = ErrorResponse(error=exc.message)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump(exclude_none=True))


def _field_name(error: dict) -> str:
    location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
    return ".".join(location) or "request"


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Malformed or missing input is a 400 with the offending fields listed"""
    errors = exc.errors()
    missing = [_field_name(e) for e in errors if e.get("type") in ("missing", "string_too_short", "too_short")]
    if missing:
        message = f"Missing required fields: {', '.join(dict.fromkeys(missing))}"
    else:
        first = errors[0] if errors else {}
        message = str(first.get("msg", "Invalid request")).removeprefix("Value error, ")

    details = [{"field": _field_name(e), "message": e.get("msg")} for e in errors]
    logger.warning("Request validation failed", path=request.url.path, fields=[d["field"] for d in details])
    return JSONResponse(status_code=400, content=ErrorResponse(error=message, details=details).model_dump())


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(
        "Unhandled exception",
        path=request.url.path,
        method=request.method,
        error=str(exc),
        exc_info=True,
    )
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(error="Internal server error").model_dump(exclude_none=True),
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "floortrack.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.ENVIRONMENT == "development",
        log_level=settings.LOG_LEVEL.lower(),
    )
