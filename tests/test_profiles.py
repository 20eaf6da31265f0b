"""Profile endpoint tests: public reads and the follow / unfollow toggle."""
import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_get_profile_anonymous(async_client: AsyncClient, register_user):
    await register_user("jake")
    resp = await async_client.get("/api/profiles/jake")
    assert resp.status_code == 200
    assert resp.json() == {"profile": {
        "username": "jake",
        "bio": "",
        "image": "",
        "following": False,
    }}


@pytest.mark.asyncio
async def test_get_profile_unknown_user(async_client: AsyncClient):
    resp = await async_client.get("/api/profiles/nobody")
    assert resp.status_code == 404
    assert resp.json() == {"errors": {"body": ["Profile not found"]}}


@pytest.mark.asyncio
async def test_get_profile_with_bad_token_is_anonymous(async_client: AsyncClient, register_user):
    """The optional gate ignores a broken token instead of rejecting the request."""
    await register_user("jake")
    resp = await async_client.get(
        "/api/profiles/jake", headers={"Authorization": "Token not-a-jwt"}
    )
    assert resp.status_code == 200
    assert resp.json()["profile"]["following"] is False


@pytest.mark.asyncio
async def test_follow_and_unfollow(async_client: AsyncClient, register_user):
    """Following flips ``following`` to true for that viewer; unfollowing flips it back."""
    await register_user("jake")
    jane = await register_user("jane")

    resp = await async_client.post("/api/profiles/jake/follow", headers=jane["headers"])
    assert resp.status_code == 200
    assert resp.json()["profile"]["following"] is True

    resp = await async_client.get("/api/profiles/jake", headers=jane["headers"])
    assert resp.json()["profile"]["following"] is True

    # Other viewers are unaffected.
    resp = await async_client.get("/api/profiles/jake")
    assert resp.json()["profile"]["following"] is False

    resp = await async_client.delete("/api/profiles/jake/follow", headers=jane["headers"])
    assert resp.status_code == 200
    assert resp.json()["profile"]["following"] is False

    resp = await async_client.get("/api/profiles/jake", headers=jane["headers"])
    assert resp.json()["profile"]["following"] is False


@pytest.mark.asyncio
async def test_follow_is_idempotent(async_client: AsyncClient, register_user):
    await register_user("jake")
    jane = await register_user("jane")

    for _ in range(2):
        resp = await async_client.post("/api/profiles/jake/follow", headers=jane["headers"])
        assert resp.status_code == 200
        assert resp.json()["profile"]["following"] is True


@pytest.mark.asyncio
async def test_unfollow_is_safe_to_repeat(async_client: AsyncClient, register_user):
    await register_user("jake")
    jane = await register_user("jane")

    for _ in range(2):
        resp = await async_client.delete("/api/profiles/jake/follow", headers=jane["headers"])
        assert resp.status_code == 200
        assert resp.json()["profile"]["following"] is False


@pytest.mark.asyncio
async def test_follow_unknown_user(async_client: AsyncClient, register_user):
    jane = await register_user("jane")
    resp = await async_client.post("/api/profiles/nobody/follow", headers=jane["headers"])
    assert resp.status_code == 404
    assert resp.json()["errors"]["body"] == ["User not found"]


@pytest.mark.asyncio
async def test_follow_requires_auth(async_client: AsyncClient, register_user):
    await register_user("jake")
    resp = await async_client.post("/api/profiles/jake/follow")
    assert resp.status_code == 401
