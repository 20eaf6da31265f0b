from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from conduit.models import Tag
from conduit.repositories.base import BaseRepository


class TagRepository(BaseRepository[Tag]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Tag)

    async def list_names(self) -> list[str]:
        result = await self.db.execute(select(Tag.name).order_by(Tag.name))
        return list(result.scalars().all())

    async def get_by_names(self, names: list[str]) -> dict[str, Tag]:
        """Map each existing name in *names* to its Tag (exact, case-sensitive match)."""
        if not names:
            return {}
        result = await self.db.execute(select(Tag).where(Tag.name.in_(set(names))))
        return {tag.name: tag for tag in result.scalars().all()}
