"""
Generic async repository shared by the concrete repositories.
Writes commit immediately; a failed write is rolled back and re-raised so the
service layer can map it to a response.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from app.database import Base
from typing import TypeVar, Generic, Optional, Dict, Any, Type
import logging

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Single-table CRUD helpers bound to one model and one session."""

    def __init__(self, model: Type[ModelType], db: AsyncSession):
        self.model = model
        self.db = db

    @property
    def model_name(self) -> str:
        return self.model.__name__

    async def _commit(self, action: str) -> None:
        try:
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"{self.model_name} {action} rolled back: {e}")
            raise

    async def create(self, values: Dict[str, Any]) -> ModelType:
        """
        Insert one row and return it with generated columns loaded.

        Args:
            values: Column values for the new row
        """
        instance = self.model(**values)
        self.db.add(instance)
        await self._commit("insert")
        await self.db.refresh(instance)
        logger.debug(f"Inserted {self.model_name} #{instance.id}")
        return instance

    async def get_by_id(self, id: int) -> Optional[ModelType]:
        result = await self.db.execute(select(self.model).where(self.model.id == id))
        return result.scalar_one_or_none()

    async def update(self, instance: ModelType, values: Dict[str, Any]) -> ModelType:
        """
        Assign ``values`` onto an instance loaded by this session and persist it.

        Returns:
            The instance, refreshed from the database
        """
        for column, value in values.items():
            setattr(instance, column, value)
        await self._commit("update")
        await self.db.refresh(instance)
        logger.debug(f"Updated {self.model_name} #{instance.id}: {sorted(values)}")
        return instance

    async def delete(self, instance: ModelType) -> None:
        instance_id = instance.id
        await self.db.delete(instance)
        await self._commit("delete")
        logger.debug(f"Deleted {self.model_name} #{instance_id}")

    async def count(self, filters: Optional[Dict[str, Any]] = None) -> int:
        """
        Count rows, optionally restricted by column equality.

        Unknown column names in ``filters`` are ignored.
        """
        query = select(func.count(self.model.id))
        for column, value in (filters or {}).items():
            if hasattr(self.model, column):
                query = query.where(getattr(self.model, column) == value)

        result = await self.db.execute(query)
        return result.scalar() or 0
