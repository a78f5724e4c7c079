"""
Database Configuration and Session Management
One process-wide async engine; one session per request
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from sqlalchemy import event, text
import structlog

from floortrack.core.config import settings, DATABASE_CONFIG
from floortrack.core.errors import classify_integrity_error

logger = structlog.get_logger()


def normalize_database_url(database_url: str) -> str:
    """Point plain driver URLs at their async drivers"""
    if database_url.startswith("postgresql://"):
        return database_url.replace("postgresql://", "postgresql+asyncpg://", 1)
    if database_url.startswith("sqlite://"):
        return database_url.replace("sqlite://", "sqlite+aiosqlite://", 1)
    return database_url


def enable_sqlite_foreign_keys(target: AsyncEngine) -> None:
    """SQLite ignores foreign keys unless asked per connection"""

    @event.listens_for(target.sync_engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def build_engine(database_url: str) -> AsyncEngine:
    database_url = normalize_database_url(database_url)
    engine_kwargs = {"echo": settings.ENVIRONMENT == "development" and settings.DEBUG}

    if database_url.startswith("postgresql"):
        engine_kwargs.update(DATABASE_CONFIG)
        engine_kwargs["connect_args"] = {
            "server_settings": {
                "application_name": "floortrack-api",
            }
        }

    async_engine = create_async_engine(database_url, **engine_kwargs)
    if database_url.startswith("sqlite"):
        enable_sqlite_foreign_keys(async_engine)
    return async_engine


engine = build_engine(settings.DATABASE_URL)

# Create session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)

# Create declarative base
Base = declarative_base()


async def get_db() -> AsyncIterator[AsyncSession]:
    """
    Database session dependency for FastAPI endpoints
    Commits whatever the handler left pending and rolls back on error
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


@asynccontextmanager
async def atomic(db: AsyncSession, conflict_message: str | None = None) -> AsyncIterator[AsyncSession]:
    """
    Run a group of statements as one transaction.

    Commits when the block exits cleanly; any exception rolls back the
    whole group. Constraint violations are re-raised as application
    errors (unique -> Conflict, foreign key -> InvalidArgument).
    """
    try:
        yield db
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        logger.warning("Atomic block rejected by constraint", error=str(exc.orig))
        raise classify_integrity_error(exc, conflict_message) from exc
    except Exception:
        await db.rollback()
        raise


async def check_database_health() -> bool:
    """Check database connectivity for the health endpoint"""
    try:
        async with engine.connect() as conn:
            result = await conn.execute(text("SELECT 1"))
            return result.scalar() == 1
    except Exception as e:
        logger.error("Database health check failed", error=str(e))
        return False


async def init_database() -> None:
    """Create tables for every registered model"""
    try:
        async with engine.begin() as conn:
            from floortrack import models  # noqa: F401

            await conn.run_sync(Base.metadata.create_all)

        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error("Database initialization failed", error=str(e))
        raise


async def close_database() -> None:
    try:
        await engine.dispose()
        logger.info("Database connections closed")
    except Exception as e:
        logger.error("Error closing database connections", error=str(e))
