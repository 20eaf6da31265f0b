"""
Pure mapping functions from persisted records to response views.

Nothing here touches the database: every viewer-relative flag (``following``,
``favorited``) and every aggregate (``favorites_count``) is computed by the
service layer and passed in explicitly.
"""
from conduit.models import Article, Comment, User
from conduit.schemas import ArticleView, CommentView, Profile, UserView


def to_user(user: User, token: str) -> UserView:
    return UserView(
        email=user.email,
        token=token,
        username=user.username,
        bio=user.bio or "",
        image=user.image or "",
    )


def to_profile(user: User, following: bool = False) -> Profile:
    return Profile(
        username=user.username,
        bio=user.bio or "",
        image=user.image or "",
        following=following,
    )


def to_article(
    article: Article,
    *,
    favorited: bool = False,
    favorites_count: int = 0,
    following: bool = False,
) -> ArticleView:
    """Render *article* with its author profile and flattened tag names."""
    return ArticleView(
        slug=article.slug,
        title=article.title,
        description=article.description,
        body=article.body,
        tag_list=[tag.name for tag in article.tags],
        created_at=article.created_at,
        updated_at=article.updated_at,
        favorited=favorited,
        favorites_count=favorites_count,
        author=to_profile(article.author, following),
    )


def to_comment(comment: Comment, following: bool = False) -> CommentView:
    return CommentView(
        id=comment.id,
        body=comment.body,
        created_at=comment.created_at,
        updated_at=comment.updated_at,
        author=to_profile(comment.author, following),
    )
