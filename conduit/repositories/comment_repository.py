from typing import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from conduit.models import Comment
from conduit.repositories.base import BaseRepository


class CommentRepository(BaseRepository[Comment]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Comment)

    async def list_for_article(self, article_id: int) -> Sequence[Comment]:
        """Comments on *article_id*, newest first, authors eager-loaded."""
        result = await self.db.execute(
            select(Comment)
            .where(Comment.article_id == article_id)
            .options(selectinload(Comment.author))
            .order_by(Comment.created_at.desc(), Comment.id.desc())
        )
        return result.scalars().all()

    async def get_with_article(self, comment_id: int) -> Comment | None:
        return await self.get_by_id(
            comment_id, selectinload(Comment.author), selectinload(Comment.article)
        )
