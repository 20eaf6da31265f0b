from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from conduit.models import ArticleFavorite
from conduit.repositories.base import BaseRepository


class FavoriteRepository(BaseRepository[ArticleFavorite]):
    """(user, article) favorite edges and the per-page aggregates built on them."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, ArticleFavorite)

    async def is_favorited(self, user_id: int, article_id: int) -> bool:
        return await self.exists(
            ArticleFavorite.user_id == user_id,
            ArticleFavorite.article_id == article_id,
        )

    async def favorite(self, user_id: int, article_id: int) -> None:
        """Insert the edge unless it already exists."""
        if await self.is_favorited(user_id, article_id):
            return
        await self.add(ArticleFavorite(user_id=user_id, article_id=article_id))

    async def unfavorite(self, user_id: int, article_id: int) -> None:
        await self.db.execute(
            delete(ArticleFavorite).where(
                ArticleFavorite.user_id == user_id,
                ArticleFavorite.article_id == article_id,
            )
        )

    async def count_by_article(self, article_ids: list[int]) -> dict[int, int]:
        """Favorite count per article id; ids with no favorites are absent."""
        if not article_ids:
            return {}
        result = await self.db.execute(
            select(ArticleFavorite.article_id, func.count())
            .where(ArticleFavorite.article_id.in_(article_ids))
            .group_by(ArticleFavorite.article_id)
        )
        return {article_id: count for article_id, count in result.all()}

    async def favorited_among(self, user_id: int, article_ids: list[int]) -> set[int]:
        if not article_ids:
            return set()
        result = await self.db.execute(
            select(ArticleFavorite.article_id).where(
                ArticleFavorite.user_id == user_id,
                ArticleFavorite.article_id.in_(article_ids),
            )
        )
        return set(result.scalars().all())
