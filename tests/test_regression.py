"""
Regression tests for cross-cutting behaviour.

1. Every error, including unknown routes and unexpected failures, uses the
   ``{"errors": {"body": [...]}}`` envelope.
2. A uniqueness race lost at the storage layer is a 422, never a 500.
3. X-Query-Count reports the real number of statements, and list endpoints
   stay at a fixed count whatever the page size.
4. CORS must not set allow_credentials=true with allow_origins=*.
5. One access-log line per request.
"""
import logging

import pytest
from httpx import ASGITransport, AsyncClient

from conduit.main import app
from conduit.repositories import FavoriteRepository, UserRepository
from conduit.services.tag_service import TagService


# ---------------------------------------------------------------------------
# 1. Error envelope
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_unknown_route_uses_envelope(async_client: AsyncClient):
    resp = await async_client.get("/api/no-such-route")
    assert resp.status_code == 404
    assert resp.json() == {"errors": {"body": ["Not found"]}}


@pytest.mark.asyncio
async def test_wrong_method_uses_envelope(async_client: AsyncClient):
    resp = await async_client.delete("/api/tags")
    assert resp.status_code == 405
    assert "errors" in resp.json()


@pytest.mark.asyncio
async def test_unexpected_failure_is_generic_500(monkeypatch):
    """Internal details stay in the log; the client sees a generic message."""

    async def _explode(self):
        raise RuntimeError("database on fire")

    monkeypatch.setattr(TagService, "find_all", _explode)
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        resp = await client.get("/api/tags")

    assert resp.status_code == 500
    assert resp.json() == {"errors": {"body": ["Internal server error"]}}
    assert "fire" not in resp.text


@pytest.mark.asyncio
async def test_health_and_root(async_client: AsyncClient):
    resp = await async_client.get("/health")
    assert resp.json() == {"status": "healthy", "version": "1.0.0"}

    resp = await async_client.get("/")
    assert resp.status_code == 200
    assert "message" in resp.json()


# ---------------------------------------------------------------------------
# 2. Uniqueness races resolved by the database
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_favorite_race_hits_unique_constraint(
    async_client: AsyncClient, register_user, create_article, monkeypatch
):
    """
    If two favorites slip past the existence check, the pair constraint
    rejects the second insert and the client gets a 422.
    """
    jake = await register_user("jake")
    article = await create_article(jake)
    await async_client.post(f"/api/articles/{article['slug']}/favorite", headers=jake["headers"])

    async def _never_favorited(self, user_id, article_id):
        return False

    monkeypatch.setattr(FavoriteRepository, "is_favorited", _never_favorited)
    resp = await async_client.post(
        f"/api/articles/{article['slug']}/favorite", headers=jake["headers"]
    )
    assert resp.status_code == 422
    assert resp.json() == {"errors": {"body": ["has already been taken"]}}

    monkeypatch.undo()
    resp = await async_client.get(f"/api/articles/{article['slug']}")
    assert resp.json()["article"]["favoritesCount"] == 1


@pytest.mark.asyncio
async def test_registration_race_hits_unique_constraint(
    async_client: AsyncClient, register_user, monkeypatch
):
    await register_user("jake")

    async def _nothing_taken(self, username, email, exclude_id=None):
        return None

    monkeypatch.setattr(UserRepository, "find_taken_field", _nothing_taken)
    resp = await async_client.post("/api/users", json={"user": {
        "username": "jake",
        "email": "jake@example.com",
        "password": "password123",
    }})
    assert resp.status_code == 422
    assert resp.json()["errors"]["body"] == ["has already been taken"]


# ---------------------------------------------------------------------------
# 3. X-Query-Count
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_query_count_header_for_article_list(
    async_client: AsyncClient, register_user, create_article
):
    """
    Anonymous list: COUNT + page SELECT + selectinload(author) +
    selectinload(tags) + favorite counts = 5 queries, for one article or many.
    """
    jake = await register_user("jake")
    await create_article(jake, title="Only", tags=["a"])

    resp = await async_client.get("/api/articles")
    assert resp.status_code == 200
    assert int(resp.headers["x-query-count"]) == 5
    assert float(resp.headers["x-response-time-ms"]) >= 0

    for i in range(4):
        await create_article(jake, title=f"More {i}", tags=["a", f"t{i}"])

    resp = await async_client.get("/api/articles")
    assert resp.json()["articlesCount"] == 5
    assert int(resp.headers["x-query-count"]) == 5


@pytest.mark.asyncio
async def test_query_count_header_for_viewer(
    async_client: AsyncClient, register_user, create_article
):
    """A signed-in viewer adds exactly two batched lookups: favorited and following."""
    jake = await register_user("jake")
    jane = await register_user("jane")
    for i in range(3):
        await create_article(jake, title=f"Post {i}")

    resp = await async_client.get("/api/articles", headers=jane["headers"])
    assert int(resp.headers["x-query-count"]) == 7


# ---------------------------------------------------------------------------
# 4. CORS headers
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_cors_no_credentials_with_wildcard_origin(async_client: AsyncClient):
    resp = await async_client.options(
        "/api/articles",
        headers={
            "Origin": "https://example.com",
            "Access-Control-Request-Method": "GET",
        },
    )
    assert resp.headers.get("access-control-allow-origin") == "*"
    cred_header = resp.headers.get("access-control-allow-credentials", "").lower()
    assert cred_header != "true"


# ---------------------------------------------------------------------------
# 5. Access log
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_access_log_line(async_client: AsyncClient, caplog):
    caplog.set_level(logging.INFO, logger="conduit.access")
    await async_client.get("/api/tags")

    lines = [r.getMessage() for r in caplog.records if r.name == "conduit.access"]
    assert len(lines) == 1
    assert lines[0].startswith("GET /api/tags 200 ")
    assert lines[0].endswith("queries=1")
