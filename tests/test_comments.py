"""
Comment endpoint tests: adding, listing, author-only deletion, and the
cascade from a deleted article to its comments and favorites.
"""
import pytest
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from conduit.models import ArticleFavorite, Comment, article_tags


async def _comment(client: AsyncClient, user: dict, slug: str, body: str) -> dict:
    resp = await client.post(
        f"/api/articles/{slug}/comments",
        headers=user["headers"],
        json={"comment": {"body": body}},
    )
    assert resp.status_code == 200, resp.text
    return resp.json()["comment"]


@pytest.mark.asyncio
async def test_add_comment(async_client: AsyncClient, register_user, create_article):
    jake = await register_user("jake")
    jane = await register_user("jane")
    article = await create_article(jake)

    resp = await async_client.post(
        f"/api/articles/{article['slug']}/comments",
        headers=jane["headers"],
        json={"comment": {"body": "Thank you so much!"}},
    )
    assert resp.status_code == 200
    comment = resp.json()["comment"]
    assert comment["body"] == "Thank you so much!"
    assert isinstance(comment["id"], int)
    assert comment["author"]["username"] == "jane"
    assert "createdAt" in comment
    assert "updatedAt" in comment


@pytest.mark.asyncio
async def test_add_comment_to_missing_article(async_client: AsyncClient, register_user):
    jane = await register_user("jane")
    resp = await async_client.post(
        "/api/articles/no-such-slug/comments",
        headers=jane["headers"],
        json={"comment": {"body": "hello"}},
    )
    assert resp.status_code == 404
    assert resp.json()["errors"]["body"] == ["Article not found"]


@pytest.mark.asyncio
async def test_add_comment_empty_body(async_client: AsyncClient, register_user, create_article):
    jake = await register_user("jake")
    article = await create_article(jake)
    resp = await async_client.post(
        f"/api/articles/{article['slug']}/comments",
        headers=jake["headers"],
        json={"comment": {"body": ""}},
    )
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_add_comment_requires_auth(async_client: AsyncClient, register_user, create_article):
    jake = await register_user("jake")
    article = await create_article(jake)
    resp = await async_client.post(
        f"/api/articles/{article['slug']}/comments", json={"comment": {"body": "hi"}}
    )
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_list_comments_newest_first(
    async_client: AsyncClient, register_user, create_article
):
    jake = await register_user("jake")
    article = await create_article(jake)
    for body in ("first", "second", "third"):
        await _comment(async_client, jake, article["slug"], body)

    resp = await async_client.get(f"/api/articles/{article['slug']}/comments")
    assert resp.status_code == 200
    assert [c["body"] for c in resp.json()["comments"]] == ["third", "second", "first"]


@pytest.mark.asyncio
async def test_list_comments_follow_annotation(
    async_client: AsyncClient, register_user, create_article
):
    jake = await register_user("jake")
    jane = await register_user("jane")
    article = await create_article(jake)
    await _comment(async_client, jake, article["slug"], "author note")
    await async_client.post("/api/profiles/jake/follow", headers=jane["headers"])

    as_jane = await async_client.get(
        f"/api/articles/{article['slug']}/comments", headers=jane["headers"]
    )
    assert as_jane.json()["comments"][0]["author"]["following"] is True

    anonymous = await async_client.get(f"/api/articles/{article['slug']}/comments")
    assert anonymous.json()["comments"][0]["author"]["following"] is False


@pytest.mark.asyncio
async def test_list_comments_missing_article(async_client: AsyncClient):
    resp = await async_client.get("/api/articles/no-such-slug/comments")
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_delete_comment(async_client: AsyncClient, register_user, create_article):
    jake = await register_user("jake")
    article = await create_article(jake)
    comment = await _comment(async_client, jake, article["slug"], "oops")

    resp = await async_client.delete(
        f"/api/articles/{article['slug']}/comments/{comment['id']}", headers=jake["headers"]
    )
    assert resp.status_code == 200
    assert resp.json() == {"message": "Comment successfully deleted"}

    resp = await async_client.get(f"/api/articles/{article['slug']}/comments")
    assert resp.json()["comments"] == []


@pytest.mark.asyncio
async def test_delete_comment_by_non_author(
    async_client: AsyncClient, register_user, create_article
):
    jake = await register_user("jake")
    jane = await register_user("jane")
    article = await create_article(jake)
    comment = await _comment(async_client, jake, article["slug"], "mine")

    resp = await async_client.delete(
        f"/api/articles/{article['slug']}/comments/{comment['id']}", headers=jane["headers"]
    )
    assert resp.status_code == 404
    assert resp.json()["errors"]["body"] == ["Comment not found or you are not the author"]


@pytest.mark.asyncio
async def test_delete_comment_through_other_article(
    async_client: AsyncClient, register_user, create_article
):
    """A slug that is not the comment's own article reports not-found and deletes nothing."""
    jake = await register_user("jake")
    first = await create_article(jake, title="First")
    second = await create_article(jake, title="Second")
    comment = await _comment(async_client, jake, first["slug"], "on the first")

    resp = await async_client.delete(
        f"/api/articles/{second['slug']}/comments/{comment['id']}", headers=jake["headers"]
    )
    assert resp.status_code == 404

    resp = await async_client.get(f"/api/articles/{first['slug']}/comments")
    assert [c["id"] for c in resp.json()["comments"]] == [comment["id"]]


@pytest.mark.asyncio
async def test_delete_missing_comment(async_client: AsyncClient, register_user, create_article):
    jake = await register_user("jake")
    article = await create_article(jake)
    resp = await async_client.delete(
        f"/api/articles/{article['slug']}/comments/9999", headers=jake["headers"]
    )
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_article_delete_cascades(
    async_client: AsyncClient, db_session: AsyncSession, register_user, create_article
):
    """Deleting an article removes its comments, favorite edges and tag links."""
    jake = await register_user("jake")
    jane = await register_user("jane")
    article = await create_article(jake, tags=["doomed"])
    await _comment(async_client, jane, article["slug"], "nice")
    await async_client.post(f"/api/articles/{article['slug']}/favorite", headers=jane["headers"])

    resp = await async_client.delete(f"/api/articles/{article['slug']}", headers=jake["headers"])
    assert resp.status_code == 200

    resp = await async_client.get(f"/api/articles/{article['slug']}/comments")
    assert resp.status_code == 404

    for table in (Comment, ArticleFavorite, article_tags):
        count = (await db_session.execute(select(func.count()).select_from(table))).scalar_one()
        assert count == 0

    # Tags themselves outlive the article.
    assert (await async_client.get("/api/tags")).json() == {"tags": ["doomed"]}
