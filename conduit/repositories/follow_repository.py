from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from conduit.models import UserFollow
from conduit.repositories.base import BaseRepository


class FollowRepository(BaseRepository[UserFollow]):
    """Directed follower → following edges."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, UserFollow)

    async def is_following(self, follower_id: int, following_id: int) -> bool:
        return await self.exists(
            UserFollow.follower_id == follower_id,
            UserFollow.following_id == following_id,
        )

    async def follow(self, follower_id: int, following_id: int) -> None:
        """Insert the edge unless it already exists."""
        if await self.is_following(follower_id, following_id):
            return
        await self.add(UserFollow(follower_id=follower_id, following_id=following_id))

    async def unfollow(self, follower_id: int, following_id: int) -> None:
        await self.db.execute(
            delete(UserFollow).where(
                UserFollow.follower_id == follower_id,
                UserFollow.following_id == following_id,
            )
        )

    async def following_ids(self, follower_id: int) -> list[int]:
        result = await self.db.execute(
            select(UserFollow.following_id).where(UserFollow.follower_id == follower_id)
        )
        return list(result.scalars().all())

    async def following_among(self, follower_id: int, user_ids: list[int]) -> set[int]:
        """Return the subset of *user_ids* that *follower_id* follows, in one query."""
        if not user_ids:
            return set()
        result = await self.db.execute(
            select(UserFollow.following_id).where(
                UserFollow.follower_id == follower_id,
                UserFollow.following_id.in_(set(user_ids)),
            )
        )
        return set(result.scalars().all())
