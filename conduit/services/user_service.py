"""
User service: registration, credentials and the follow graph.

Uniqueness of username and email is checked before every insert/update so
the common case yields a clean 422; the unique constraints on the table
remain the final word when two requests race.
"""
import logging
from typing import Any

from conduit.exceptions import ConflictError, NotFoundError
from conduit.models import User
from conduit.repositories import FollowRepository, UserRepository
from conduit.security import hash_password, verify_password

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, users: UserRepository, follows: FollowRepository) -> None:
        self.users = users
        self.follows = follows

    async def create(self, username: str, email: str, password: str) -> User:
        """Register a new user; raises ConflictError if username or email is taken."""
        taken = await self.users.find_taken_field(username, email)
        if taken:
            raise ConflictError(f"{taken} already exists")

        user = User(
            username=username,
            email=email,
            password=hash_password(password),
            bio="",
            image="",
        )
        await self.users.add(user)
        logger.info("Registered user id=%s username=%s", user.id, user.username)
        return user

    async def find_by_id(self, user_id: int) -> User | None:
        return await self.users.get_by_id(user_id)

    async def find_by_email(self, email: str, include_password: bool = False) -> User | None:
        return await self.users.get_by_email(email, include_password)

    async def find_by_username(self, username: str) -> User | None:
        return await self.users.get_by_username(username)

    async def authenticate(self, email: str, password: str) -> User | None:
        """Return the user when *password* matches the stored hash, else None."""
        user = await self.find_by_email(email, include_password=True)
        if user is None or not verify_password(password, user.password):
            return None
        return user

    async def update(self, user: User, changes: dict[str, Any]) -> User:
        """
        Persist the fields present in *changes*; absent fields are left alone.

        A new password is hashed before storage.  Changing username or email
        to a value held by another user raises ConflictError.
        """
        # username / email / password are NOT NULL; an explicit null means "no change".
        changes = {
            field: value
            for field, value in changes.items()
            if value is not None or field in ("bio", "image")
        }
        taken = await self.users.find_taken_field(
            changes.get("username"), changes.get("email"), exclude_id=user.id
        )
        if taken:
            raise ConflictError(f"{taken} already exists")
        if "password" in changes:
            changes["password"] = hash_password(changes["password"])
        return await self.users.update(user, changes)

    # ------------------------------------------------------------------
    # Follow graph
    # ------------------------------------------------------------------

    async def _resolve_target(self, username: str) -> User:
        target = await self.find_by_username(username)
        if target is None:
            raise NotFoundError("User not found")
        return target

    async def follow_user(self, current_user_id: int, target_username: str) -> User:
        """Follow *target_username*; following twice is a no-op.  Returns the target."""
        target = await self._resolve_target(target_username)
        await self.follows.follow(current_user_id, target.id)
        return target

    async def unfollow_user(self, current_user_id: int, target_username: str) -> User:
        target = await self._resolve_target(target_username)
        await self.follows.unfollow(current_user_id, target.id)
        return target

    async def is_following(self, current_user_id: int, target_user_id: int) -> bool:
        return await self.follows.is_following(current_user_id, target_user_id)
