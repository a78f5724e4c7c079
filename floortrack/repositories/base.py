"""
Base CRUD Repository Pattern
Generic repository with common database operations
"""

from typing import Any, Dict, Generic, List, Optional, Sequence, Type, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, func
import structlog

from floortrack.core.database import Base

logger = structlog.get_logger()

ModelType = TypeVar("ModelType", bound=Base)


class CRUDBase(Generic[ModelType]):
    """
    Base CRUD repository with generic database operations

    Write methods take ``commit``: with ``commit=False`` they only flush, so
    callers can group several writes inside one ``atomic`` block.
    """

    def __init__(self, model: Type[ModelType]):
        """
        Initialize CRUD repository

        Args:
            model: SQLAlchemy model class
        """
        self.model = model

    async def get(self, db: AsyncSession, id: int) -> Optional[ModelType]:
        """
        Get a single record by ID

        Args:
            db: Database session
            id: Record ID

        Returns:
            Model instance or None
        """
        result = await db.execute(select(self.model).where(self.model.id == id))
        record = result.scalar_one_or_none()

        if record is None:
            logger.debug("Record not found", model=self.model.__name__, id=id)
        return record

    async def get_many(self, db: AsyncSession, ids: Sequence[int]) -> List[ModelType]:
        """Fetch the records whose id is in ``ids``, ascending id"""
        if not ids:
            return []
        result = await db.execute(
            select(self.model).where(self.model.id.in_(list(ids))).order_by(self.model.id.asc())
        )
        return list(result.scalars().all())

    async def get_multi(
        self,
        db: AsyncSession,
        *,
        filters: Optional[Dict[str, Any]] = None,
    ) -> List[ModelType]:
        """
        Get records matching simple equality / IN filters, ascending id

        Args:
            db: Database session
            filters: Dictionary of field filters (lists become IN)

        Returns:
            List of model instances
        """
        query = select(self.model)

        if filters:
            for field, value in filters.items():
                if hasattr(self.model, field):
                    column = getattr(self.model, field)
                    if isinstance(value, list):
                        query = query.where(column.in_(value))
                    else:
                        query = query.where(column == value)

        result = await db.execute(query.order_by(self.model.id.asc()))
        records = list(result.scalars().all())

        logger.debug("Multiple records retrieved", model=self.model.__name__, count=len(records))
        return records

    async def count(self, db: AsyncSession, *, filters: Optional[Dict[str, Any]] = None) -> int:
        query = select(func.count(self.model.id))
        if filters:
            for field, value in filters.items():
                if hasattr(self.model, field):
                    query = query.where(getattr(self.model, field) == value)

        return (await db.execute(query)).scalar() or 0

    async def exists(self, db: AsyncSession, *, filters: Dict[str, Any]) -> bool:
        query = select(self.model.id)
        for field, value in filters.items():
            column = getattr(self.model, field)
            if isinstance(value, (list, tuple, set)):
                query = query.where(column.in_(list(value)))
            else:
                query = query.where(column == value)

        result = await db.execute(query.limit(1))
        return result.first() is not None

    async def create(
        self,
        db: AsyncSession,
        *,
        obj_in: Dict[str, Any],
        commit: bool = True
    ) -> ModelType:
        """
        Create a new record

        Args:
            db: Database session
            obj_in: Column values
            commit: Whether to commit the transaction

        Returns:
            Created model instance
        """
        db_obj = self.model(**obj_in)
        db.add(db_obj)

        if commit:
            await db.commit()
            await db.refresh(db_obj)
        else:
            await db.flush()

        logger.info("Record created", model=self.model.__name__, id=getattr(db_obj, "id", None))
        return db_obj

    async def update(
        self,
        db: AsyncSession,
        *,
        db_obj: ModelType,
        obj_in: Dict[str, Any],
        commit: bool = True
    ) -> ModelType:
        """
        Update an existing record

        Args:
            db: Database session
            db_obj: Existing model instance
            obj_in: Column values to change
            commit: Whether to commit the transaction

        Returns:
            Updated model instance
        """
        for field, value in obj_in.items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)

        db.add(db_obj)
        if commit:
            await db.commit()
            await db.refresh(db_obj)
        else:
            await db.flush()

        logger.info("Record updated", model=self.model.__name__, id=db_obj.id, fields=sorted(obj_in))
        return db_obj

    async def remove(self, db: AsyncSession, *, db_obj: ModelType, commit: bool = True) -> None:
        """Hard-delete a loaded record"""
        await db.delete(db_obj)
        if commit:
            await db.commit()
        else:
            await db.flush()

        logger.info("Record deleted", model=self.model.__name__, id=getattr(db_obj, "id", None))

    async def delete_where(self, db: AsyncSession, *, filters: Dict[str, Any]) -> int:
        """Bulk delete by equality filters; flushes only, callers commit"""
        statement = delete(self.model)
        for field, value in filters.items():
            statement = statement.where(getattr(self.model, field) == value)

        result = await db.execute(statement)
        logger.debug("Records deleted", model=self.model.__name__, count=result.rowcount, filters=filters)
        return result.rowcount or 0
