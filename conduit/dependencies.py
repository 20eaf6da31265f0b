"""
FastAPI dependencies: pagination, authentication gates and per-request
service construction.

Authentication
--------------
Clients send ``Authorization: Token <jwt>``.

- ``get_current_user`` (required gate) raises ``AuthenticationError`` (401)
  when the header is absent, not of the ``Token`` scheme, or the token
  fails verification, expiry included.
- ``get_optional_user`` (optional gate) returns None on any of those
  failures and the request proceeds anonymously.
"""
from dataclasses import dataclass

import jwt
from fastapi import Depends, Query
from fastapi.security import APIKeyHeader
from sqlalchemy.ext.asyncio import AsyncSession

from conduit.config import settings
from conduit.database import get_db
from conduit.exceptions import AuthenticationError
from conduit.repositories import (
    ArticleRepository,
    CommentRepository,
    FavoriteRepository,
    FollowRepository,
    TagRepository,
    UserRepository,
)
from conduit.security import decode_token
from conduit.services.article_service import ArticleService
from conduit.services.comment_service import CommentService
from conduit.services.profile_service import ProfileService
from conduit.services.tag_service import TagService
from conduit.services.user_service import UserService

TOKEN_SCHEME = "Token"

# auto_error=False: the gates below decide how a missing header is handled.
authorization_header = APIKeyHeader(name="Authorization", auto_error=False)


def _int_or_default(raw: str | None, default: int, minimum: int) -> int:
    """Parse a paging value; anything unparsable or below *minimum* means *default*."""
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    return value if value >= minimum else default


class PaginationParams:
    """
    Reusable FastAPI dependency that parses ``limit`` / ``offset`` query
    parameters.

    Values are read leniently: a missing, unparsable or out-of-range value
    falls back to the default instead of failing the request.

    Attributes
    ----------
    limit:
        Maximum number of articles returned (default 20, at least 1).
        Clamped to ``settings.MAX_PAGE_SIZE`` when that is set.
    offset:
        Number of articles skipped from the newest-first ordering
        (default 0).
    """

    def __init__(
        self,
        limit: str | None = Query(
            None,
            description="Number of articles returned (default 20).",
        ),
        offset: str | None = Query(
            None,
            description="Number of articles skipped (default 0).",
        ),
    ) -> None:
        self.limit = _int_or_default(limit, settings.DEFAULT_PAGE_SIZE, minimum=1)
        if settings.MAX_PAGE_SIZE is not None:
            self.limit = min(self.limit, settings.MAX_PAGE_SIZE)
        self.offset = _int_or_default(offset, 0, minimum=0)


@dataclass(frozen=True)
class CurrentUser:
    """Identity carried by a verified token."""

    id: int


def _parse_token(header: str | None) -> CurrentUser:
    if not header:
        raise AuthenticationError("Authorization token missing")

    scheme, _, token = header.partition(" ")
    if scheme != TOKEN_SCHEME or not token.strip():
        raise AuthenticationError("Authorization token missing")

    token = token.strip()
    try:
        payload = decode_token(token)
    except jwt.InvalidTokenError:
        raise AuthenticationError("Invalid token")

    try:
        return CurrentUser(id=int(payload["id"]))
    except (KeyError, TypeError, ValueError):
        raise AuthenticationError("Invalid token")


async def get_current_user(
    authorization: str | None = Depends(authorization_header),
) -> CurrentUser:
    return _parse_token(authorization)


async def get_optional_user(
    authorization: str | None = Depends(authorization_header),
) -> CurrentUser | None:
    try:
        return _parse_token(authorization)
    except AuthenticationError:
        return None


# ---------------------------------------------------------------------------
# Service providers: one repository set per request-scoped session
# ---------------------------------------------------------------------------

def get_user_service(db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(UserRepository(db), FollowRepository(db))


def get_profile_service(
    user_service: UserService = Depends(get_user_service),
) -> ProfileService:
    return ProfileService(user_service)


def get_tag_service(db: AsyncSession = Depends(get_db)) -> TagService:
    return TagService(TagRepository(db))


def get_article_service(db: AsyncSession = Depends(get_db)) -> ArticleService:
    return ArticleService(
        ArticleRepository(db),
        FavoriteRepository(db),
        FollowRepository(db),
        UserRepository(db),
        TagService(TagRepository(db)),
    )


def get_comment_service(db: AsyncSession = Depends(get_db)) -> CommentService:
    return CommentService(
        CommentRepository(db),
        ArticleRepository(db),
        UserRepository(db),
        FollowRepository(db),
    )
