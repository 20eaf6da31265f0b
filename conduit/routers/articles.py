from fastapi import APIRouter, Depends, Query

from conduit.dependencies import (
    CurrentUser,
    PaginationParams,
    get_article_service,
    get_comment_service,
    get_current_user,
    get_optional_user,
)
from conduit.exceptions import NotFoundError
from conduit.schemas import (
    ArticleCreateRequest,
    ArticleResponse,
    ArticleUpdateRequest,
    CommentCreateRequest,
    CommentResponse,
    MessageResponse,
    MultipleArticlesResponse,
    MultipleCommentsResponse,
)
from conduit.services.article_service import ArticleService
from conduit.services.comment_service import CommentService

router = APIRouter(prefix="/articles", tags=["articles"])

NOT_FOUND_OR_NOT_AUTHOR = "Article not found or you are not the author"


@router.get("", response_model=MultipleArticlesResponse)
async def list_articles(
    tag: str | None = Query(None, description="Filter by tag name."),
    author: str | None = Query(None, description="Filter by author username."),
    favorited: str | None = Query(None, description="Filter by username of a user who favorited."),
    pagination: PaginationParams = Depends(),
    viewer: CurrentUser | None = Depends(get_optional_user),
    article_service: ArticleService = Depends(get_article_service),
):
    articles, count = await article_service.find_all(
        tag=tag,
        author=author,
        favorited=favorited,
        limit=pagination.limit,
        offset=pagination.offset,
        viewer_id=viewer.id if viewer else None,
    )
    return MultipleArticlesResponse(articles=articles, articles_count=count)


# Declared before "/{slug}" so "feed" is never taken for a slug.
@router.get("/feed", response_model=MultipleArticlesResponse)
async def feed(
    pagination: PaginationParams = Depends(),
    current: CurrentUser = Depends(get_current_user),
    article_service: ArticleService = Depends(get_article_service),
):
    articles, count = await article_service.get_feed(
        current.id, pagination.limit, pagination.offset
    )
    return MultipleArticlesResponse(articles=articles, articles_count=count)


@router.get("/{slug}", response_model=ArticleResponse)
async def get_article(
    slug: str,
    viewer: CurrentUser | None = Depends(get_optional_user),
    article_service: ArticleService = Depends(get_article_service),
):
    article = await article_service.find_by_slug(slug, viewer.id if viewer else None)
    if article is None:
        raise NotFoundError("Article not found")
    return ArticleResponse(article=article)


@router.post("", status_code=201, response_model=ArticleResponse)
async def create_article(
    data: ArticleCreateRequest,
    current: CurrentUser = Depends(get_current_user),
    article_service: ArticleService = Depends(get_article_service),
):
    return ArticleResponse(article=await article_service.create(data.article, current.id))


@router.put("/{slug}", response_model=ArticleResponse)
async def update_article(
    slug: str,
    data: ArticleUpdateRequest,
    current: CurrentUser = Depends(get_current_user),
    article_service: ArticleService = Depends(get_article_service),
):
    article = await article_service.update(slug, data.article, current.id)
    if article is None:
        raise NotFoundError(NOT_FOUND_OR_NOT_AUTHOR)
    return ArticleResponse(article=article)


@router.delete("/{slug}", response_model=MessageResponse)
async def delete_article(
    slug: str,
    current: CurrentUser = Depends(get_current_user),
    article_service: ArticleService = Depends(get_article_service),
):
    if not await article_service.delete(slug, current.id):
        raise NotFoundError(NOT_FOUND_OR_NOT_AUTHOR)
    return MessageResponse(message="Article successfully deleted")


# ---------------------------------------------------------------------------
# Favorites
# ---------------------------------------------------------------------------

@router.post("/{slug}/favorite", response_model=ArticleResponse)
async def favorite_article(
    slug: str,
    current: CurrentUser = Depends(get_current_user),
    article_service: ArticleService = Depends(get_article_service),
):
    article = await article_service.favorite(slug, current.id)
    if article is None:
        raise NotFoundError("Article not found")
    return ArticleResponse(article=article)


@router.delete("/{slug}/favorite", response_model=ArticleResponse)
async def unfavorite_article(
    slug: str,
    current: CurrentUser = Depends(get_current_user),
    article_service: ArticleService = Depends(get_article_service),
):
    article = await article_service.unfavorite(slug, current.id)
    if article is None:
        raise NotFoundError("Article not found")
    return ArticleResponse(article=article)


# ---------------------------------------------------------------------------
# Comments
# ---------------------------------------------------------------------------

@router.get("/{slug}/comments", response_model=MultipleCommentsResponse)
async def list_comments(
    slug: str,
    viewer: CurrentUser | None = Depends(get_optional_user),
    comment_service: CommentService = Depends(get_comment_service),
):
    comments = await comment_service.find_by_article(slug, viewer.id if viewer else None)
    if comments is None:
        raise NotFoundError("Article not found")
    return MultipleCommentsResponse(comments=comments)


@router.post("/{slug}/comments", response_model=CommentResponse)
async def add_comment(
    slug: str,
    data: CommentCreateRequest,
    current: CurrentUser = Depends(get_current_user),
    comment_service: CommentService = Depends(get_comment_service),
):
    comment = await comment_service.create(slug, data.comment.body, current.id)
    if comment is None:
        raise NotFoundError("Article not found")
    return CommentResponse(comment=comment)


@router.delete("/{slug}/comments/{comment_id}", response_model=MessageResponse)
async def delete_comment(
    slug: str,
    comment_id: int,
    current: CurrentUser = Depends(get_current_user),
    comment_service: CommentService = Depends(get_comment_service),
):
    if not await comment_service.delete(comment_id, slug, current.id):
        raise NotFoundError("Comment not found or you are not the author")
    return MessageResponse(message="Comment successfully deleted")
