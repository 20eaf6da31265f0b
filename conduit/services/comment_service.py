"""
Comment service: comments on articles.

Any authenticated user may comment on an existing article; only the
author may delete, and only through the slug of the article the comment
belongs to.  Every failed delete precondition looks the same to the caller
(``False`` → 404), so a comment id cannot be matched against another article.
"""
from conduit.exceptions import NotFoundError
from conduit.models import Article, Comment
from conduit.repositories import (
    ArticleRepository,
    CommentRepository,
    FollowRepository,
    UserRepository,
)
from conduit.schemas import CommentView
from conduit.views import to_comment


class CommentService:
    def __init__(
        self,
        comments: CommentRepository,
        articles: ArticleRepository,
        users: UserRepository,
        follows: FollowRepository,
    ) -> None:
        self.comments = comments
        self.articles = articles
        self.users = users
        self.follows = follows

    async def find_by_article(
        self, slug: str, viewer_id: int | None = None
    ) -> list[CommentView] | None:
        """
        Return the article's comments newest-first, or None when the
        article does not exist.
        """
        article = await self.articles.find_one(Article.slug == slug)
        if article is None:
            return None

        comments = await self.comments.list_for_article(article.id)
        following: set[int] = set()
        if viewer_id is not None:
            following = await self.follows.following_among(
                viewer_id, [c.author_id for c in comments]
            )
        return [to_comment(c, c.author_id in following) for c in comments]

    async def create(self, slug: str, body: str, author_id: int) -> CommentView | None:
        """Add a comment to the article at *slug*; None when the article is missing."""
        article = await self.articles.find_one(Article.slug == slug)
        if article is None:
            return None

        author = await self.users.get_by_id(author_id)
        if author is None:
            raise NotFoundError("Author not found")

        comment = Comment(body=body, article_id=article.id, author=author)
        await self.comments.add(comment)
        return to_comment(comment)

    async def delete(self, comment_id: int, slug: str, user_id: int) -> bool:
        comment = await self.comments.get_with_article(comment_id)
        if comment is None or comment.author_id != user_id:
            return False
        if comment.article.slug != slug:
            return False

        await self.comments.delete(comment)
        return True
