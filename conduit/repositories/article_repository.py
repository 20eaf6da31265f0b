"""
Article queries.

Listing issues exactly two statements per call: a COUNT over the filtered
set (before pagination) and the paginated SELECT.  Author and tags are
loaded with ``selectinload`` so a page costs a fixed number of extra
queries regardless of its size.
"""
from typing import Sequence

from sqlalchemy import Select, delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from conduit.models import Article, ArticleFavorite, Tag, User
from conduit.repositories.base import BaseRepository

_ARTICLE_LOAD = (selectinload(Article.author), selectinload(Article.tags))


class ArticleRepository(BaseRepository[Article]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Article)

    async def get_by_slug(self, slug: str) -> Article | None:
        return await self.find_one(Article.slug == slug, options=_ARTICLE_LOAD)

    async def slug_exists(self, slug: str) -> bool:
        return await self.exists(Article.slug == slug)

    def filtered_query(
        self,
        tag: str | None = None,
        author: str | None = None,
        favorited: str | None = None,
        author_ids: list[int] | None = None,
    ) -> Select:
        """
        Build the un-paginated SELECT for the given filters.

        ``EXISTS`` sub-queries (``any`` / ``has``) keep one row per article,
        so the COUNT and the page never see join duplicates.
        """
        query: Select = select(Article)
        if tag:
            query = query.where(Article.tags.any(Tag.name == tag))
        if author:
            query = query.where(Article.author.has(User.username == author))
        if favorited:
            query = query.where(
                Article.favorites.any(ArticleFavorite.user.has(User.username == favorited))
            )
        if author_ids is not None:
            query = query.where(Article.author_id.in_(author_ids))
        return query

    async def get_page(
        self, query: Select, limit: int, offset: int
    ) -> tuple[Sequence[Article], int]:
        """Return (articles newest-first, total count before pagination)."""
        count_q = select(func.count()).select_from(query.subquery())
        total: int = (await self.db.execute(count_q)).scalar_one()

        page_q = (
            query.options(*_ARTICLE_LOAD)
            .order_by(Article.created_at.desc(), Article.id.desc())
            .offset(offset)
            .limit(limit)
        )
        result = await self.db.execute(page_q)
        return result.scalars().all(), total

    async def delete_by_id(self, article_id: int) -> None:
        """Delete the row; comments, favorites and tag links cascade in the database."""
        await self.db.execute(delete(Article).where(Article.id == article_id))
