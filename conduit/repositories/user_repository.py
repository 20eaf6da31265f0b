from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import undefer

from conduit.models import User
from conduit.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, User)

    async def get_by_email(self, email: str, include_password: bool = False) -> User | None:
        """
        Look a user up by email.

        The password hash is deferred on the model; *include_password*
        undefers it for the login path only.
        """
        options = (undefer(User.password),) if include_password else ()
        return await self.find_one(User.email == email, options=options)

    async def get_by_username(self, username: str) -> User | None:
        return await self.find_one(User.username == username)

    async def find_taken_field(
        self,
        username: str | None,
        email: str | None,
        exclude_id: int | None = None,
    ) -> str | None:
        """
        Return ``"username"`` or ``"email"`` when another user already holds
        that value, else None.  Username wins when both collide.
        """
        clauses = []
        if username is not None:
            clauses.append(User.username == username)
        if email is not None:
            clauses.append(User.email == email)
        if not clauses:
            return None

        query = select(User).where(or_(*clauses))
        if exclude_id is not None:
            query = query.where(User.id != exclude_id)
        result = await self.db.execute(query)
        existing = result.scalars().all()
        if any(u.username == username for u in existing):
            return "username"
        if existing:
            return "email"
        return None
