"""
Base CRUD repository: parent class for all entity repositories.

A repository is bound to one ``AsyncSession`` for its whole lifetime (one
request).  Writes flush but never commit; the transaction boundary belongs
to the ``get_db`` dependency.

Usage::

    class TagRepository(BaseRepository[Tag]):
        def __init__(self, db: AsyncSession) -> None:
            super().__init__(db, Tag)
"""
from typing import Any, Awaitable, Callable, Generic, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from conduit.database import AFTER_COMMIT_KEY, Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Generic create / read / update / delete for one mapped model."""

    def __init__(self, db: AsyncSession, model: type[ModelType]) -> None:
        self.db = db
        self.model: type[ModelType] = model

    async def get_by_id(self, record_id: int, *options) -> ModelType | None:
        query: Select = select(self.model).where(self.model.id == record_id)
        if options:
            query = query.options(*options)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def find_one(self, *criteria, options: tuple = ()) -> ModelType | None:
        """Return the single row matching every criterion, or None."""
        query: Select = select(self.model).where(*criteria)
        if options:
            query = query.options(*options)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def add(self, obj: ModelType) -> ModelType:
        """Stage *obj* and flush so database-generated keys are populated."""
        self.db.add(obj)
        await self.db.flush()
        return obj

    async def update(self, obj: ModelType, update_data: dict[str, Any]) -> ModelType:
        """
        Apply *update_data* to *obj* and flush.

        Callers pass ``model_dump(exclude_unset=True)`` so fields the client
        did not send stay untouched.
        """
        for field, value in update_data.items():
            if hasattr(type(obj), field):
                setattr(obj, field, value)
        await self.db.flush()
        return obj

    async def delete(self, obj: ModelType) -> None:
        await self.db.delete(obj)
        await self.db.flush()

    def after_commit(self, callback: Callable[[], Awaitable[None]]) -> None:
        """Queue *callback* to run once the request's transaction has committed."""
        callbacks = self.db.info.setdefault(AFTER_COMMIT_KEY, [])
        if callback not in callbacks:
            callbacks.append(callback)

    async def exists(self, *criteria) -> bool:
        query: Select = select(func.count()).select_from(self.model).where(*criteria)
        count: int = (await self.db.execute(query)).scalar() or 0
        return count > 0
