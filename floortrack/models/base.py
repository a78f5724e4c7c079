"""
Base Model Classes
Common columns for all tables
"""

from sqlalchemy import BigInteger, Column, DateTime, Integer
from sqlalchemy.sql import func

from floortrack.core.database import Base

# SQLite only autoincrements INTEGER PRIMARY KEY columns
BigIntId = BigInteger().with_variant(Integer(), "sqlite")


class TimestampMixin:
    """Mixin for created_at and updated_at timestamps"""
    # Fetch server-generated timestamps at flush; async sessions cannot lazy-load them
    __mapper_args__ = {"eager_defaults": True}

    created_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
        index=True,
    )


class BigIntIdMixin:
    """Mixin for a 64-bit autoincrement primary key"""
    id = Column(BigIntId, primary_key=True, autoincrement=True)


class BaseModel(Base, BigIntIdMixin):
    """Base model with a 64-bit id"""
    __abstract__ = True
