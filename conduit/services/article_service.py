"""
Article service: business logic for the Article aggregate.

Design notes
------------
- Every article leaving this service is annotated for the current viewer:
  flattened ``tagList``, ``favorited``, ``favoritesCount`` and
  ``author.following``.  Annotation is batched per page: one query for
  favorite counts, one for the viewer's favorites, one for the viewer's
  follows, whatever the page size.
- Anonymous viewers (``viewer_id=None``) get ``favorited=False`` and
  ``following=False`` without touching the edge tables.
- Ownership failures are reported exactly like missing articles (``None`` /
  ``False``) so non-authors cannot discover whether it exists.
- Service methods flush but do not commit; the transaction boundary is
  owned by the ``get_db`` dependency in the router layer.
"""
import logging
import re
import time
from typing import Sequence

from conduit.exceptions import NotFoundError
from conduit.models import Article
from conduit.repositories import (
    ArticleRepository,
    FavoriteRepository,
    FollowRepository,
    UserRepository,
)
from conduit.schemas import ArticleCreate, ArticleUpdate, ArticleView
from conduit.services.tag_service import TagService
from conduit.views import to_article

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

_SLUG_STRIP_RE = re.compile(r"[^\w\s-]")
_SLUG_SPACE_RE = re.compile(r"[\s_]+")
_SLUG_DASH_RE = re.compile(r"-+")
_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def slugify(text: str) -> str:
    """Return a URL-safe, lowercase slug derived from *text*."""
    text = _SLUG_STRIP_RE.sub("", text.lower().strip())
    text = _SLUG_SPACE_RE.sub("-", text)
    return _SLUG_DASH_RE.sub("-", text).strip("-")


def to_base36(number: int) -> str:
    if number == 0:
        return "0"
    digits = []
    while number:
        number, rem = divmod(number, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


class ArticleService:
    def __init__(
        self,
        articles: ArticleRepository,
        favorites: FavoriteRepository,
        follows: FollowRepository,
        users: UserRepository,
        tag_service: TagService,
    ) -> None:
        self.articles = articles
        self.favorites = favorites
        self.follows = follows
        self.users = users
        self.tag_service = tag_service

    # ------------------------------------------------------------------
    # Aggregation
    # ------------------------------------------------------------------

    async def _annotate(
        self, articles: Sequence[Article], viewer_id: int | None
    ) -> list[ArticleView]:
        article_ids = [a.id for a in articles]
        counts = await self.favorites.count_by_article(article_ids)

        favorited: set[int] = set()
        following: set[int] = set()
        if viewer_id is not None:
            favorited = await self.favorites.favorited_among(viewer_id, article_ids)
            following = await self.follows.following_among(
                viewer_id, [a.author_id for a in articles]
            )

        return [
            to_article(
                a,
                favorited=a.id in favorited,
                favorites_count=counts.get(a.id, 0),
                following=a.author_id in following,
            )
            for a in articles
        ]

    async def _annotate_one(self, article: Article, viewer_id: int | None) -> ArticleView:
        return (await self._annotate([article], viewer_id))[0]

    async def _unique_slug(self, title: str) -> str:
        """
        Slugified title plus a base-36 millisecond timestamp.  On the rare
        same-millisecond collision the timestamp is bumped until free.
        """
        base = slugify(title)
        stamp = int(time.time() * 1000)
        while True:
            slug = "-".join(part for part in (base, to_base36(stamp)) if part)
            if not await self.articles.slug_exists(slug):
                return slug
            stamp += 1

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def find_all(
        self,
        tag: str | None = None,
        author: str | None = None,
        favorited: str | None = None,
        limit: int = 20,
        offset: int = 0,
        viewer_id: int | None = None,
    ) -> tuple[list[ArticleView], int]:
        """
        Return (annotated articles newest-first, total matches before
        pagination) for the optional tag / author / favorited-by filters.
        """
        query = self.articles.filtered_query(tag=tag, author=author, favorited=favorited)
        articles, total = await self.articles.get_page(query, limit, offset)
        return await self._annotate(articles, viewer_id), total

    async def get_feed(
        self, viewer_id: int, limit: int = 20, offset: int = 0
    ) -> tuple[list[ArticleView], int]:
        """Articles by authors *viewer_id* follows; empty when they follow nobody."""
        following_ids = await self.follows.following_ids(viewer_id)
        if not following_ids:
            return [], 0

        query = self.articles.filtered_query(author_ids=following_ids)
        articles, total = await self.articles.get_page(query, limit, offset)
        return await self._annotate(articles, viewer_id), total

    async def find_by_slug(self, slug: str, viewer_id: int | None = None) -> ArticleView | None:
        article = await self.articles.get_by_slug(slug)
        if article is None:
            return None
        return await self._annotate_one(article, viewer_id)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def create(self, data: ArticleCreate, author_id: int) -> ArticleView:
        author = await self.users.get_by_id(author_id)
        if author is None:
            raise NotFoundError("Author not found")

        tags = await self.tag_service.find_or_create_by_names(data.tag_list)
        article = Article(
            title=data.title,
            slug=await self._unique_slug(data.title),
            description=data.description,
            body=data.body,
            author=author,
            tags=tags,
        )
        await self.articles.add(article)
        logger.info("Article created slug=%s author_id=%s", article.slug, author_id)
        return await self._annotate_one(article, author_id)

    async def update(
        self, slug: str, data: ArticleUpdate, viewer_id: int
    ) -> ArticleView | None:
        """
        Partially update the article at *slug* if *viewer_id* is its author.

        Only fields explicitly set in the request payload are modified
        (``model_dump(exclude_unset=True)``); a new title regenerates the slug.
        Returns None when the article is missing or owned by someone else.
        """
        article = await self.articles.get_by_slug(slug)
        if article is None or article.author_id != viewer_id:
            return None

        update_data = data.model_dump(exclude_unset=True)
        tags_data: list[str] | None = update_data.pop("tag_list", None)
        update_data = {field: value for field, value in update_data.items() if value is not None}

        if "title" in update_data:
            update_data["slug"] = await self._unique_slug(update_data["title"])

        if tags_data is not None:
            update_data["tags"] = await self.tag_service.find_or_create_by_names(tags_data)

        await self.articles.update(article, update_data)
        return await self._annotate_one(article, viewer_id)

    async def delete(self, slug: str, viewer_id: int) -> bool:
        article = await self.articles.get_by_slug(slug)
        if article is None or article.author_id != viewer_id:
            return False

        await self.articles.delete_by_id(article.id)
        logger.info("Article deleted slug=%s", slug)
        return True

    async def favorite(self, slug: str, user_id: int) -> ArticleView | None:
        article = await self.articles.get_by_slug(slug)
        if article is None:
            return None
        await self.favorites.favorite(user_id, article.id)
        return await self._annotate_one(article, user_id)

    async def unfavorite(self, slug: str, user_id: int) -> ArticleView | None:
        article = await self.articles.get_by_slug(slug)
        if article is None:
            return None
        await self.favorites.unfavorite(user_id, article.id)
        return await self._annotate_one(article, user_id)
