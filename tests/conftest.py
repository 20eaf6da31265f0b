"""
Test infrastructure for the Conduit API.

Strategy
--------
- Settings are read from the environment at import time, so the overrides
  below are applied before anything from ``conduit`` is imported: a cheap
  bcrypt cost factor, no SQL echo and an SQLite URL for the module-level
  production engine (which the tests never use).
- SQLite in-memory via aiosqlite; StaticPool makes every session share the
  one connection, since an in-memory database lives and dies with it.
- ``PRAGMA foreign_keys`` is switched on for the test engine so
  ``ON DELETE CASCADE`` behaves as it does on Postgres.
- The app's get_db dependency is overridden with the test session factory.
- Tables are created before each test and dropped after it.
- Redis is disabled by setting cache._redis = None; the CacheManager treats
  that as a permanent cache miss.
"""
import os

os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["DEBUG"] = "false"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET_KEY"] = "test-secret-key-at-least-32-bytes-long"

import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from conduit.cache import cache  # noqa: E402
from conduit.database import Base, get_db, install_sqlite_foreign_keys, run_after_commit  # noqa: E402
from conduit.main import app  # noqa: E402
from conduit.middleware import install_query_counter  # noqa: E402

# ---------------------------------------------------------------------------
# Test database engine: SQLite in-memory with aiosqlite
# ---------------------------------------------------------------------------

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

engine_test = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

install_query_counter(engine_test)
install_sqlite_foreign_keys(engine_test)

async_session_test = async_sessionmaker(
    engine_test,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def override_get_db():
    async with async_session_test() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        await run_after_commit(session)


app.dependency_overrides[get_db] = override_get_db


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture(autouse=True)
async def setup_db():
    """Create all tables before each test, drop after to guarantee isolation."""
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture
async def db_session() -> AsyncSession:
    """A live session for seeding data or asserting on rows directly."""
    async with async_session_test() as session:
        yield session


@pytest_asyncio.fixture
async def async_client() -> AsyncClient:
    cache._redis = None
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def register_user(async_client: AsyncClient):
    """
    Factory fixture: ``await register_user("jake")`` registers
    ``jake`` / ``jake@example.com`` / ``password123`` and returns the
    ``user`` object from the response (token included) plus a ready-made
    ``headers`` dict carrying its Authorization header.
    """

    async def _register(username: str, password: str = "password123") -> dict:
        resp = await async_client.post("/api/users", json={"user": {
            "username": username,
            "email": f"{username}@example.com",
            "password": password,
        }})
        assert resp.status_code == 201, resp.text
        user = resp.json()["user"]
        user["headers"] = {"Authorization": f"Token {user['token']}"}
        return user

    return _register


@pytest_asyncio.fixture
async def create_article(async_client: AsyncClient):
    """Factory fixture: publish an article as *user* and return the article object."""

    async def _create(
        user: dict,
        title: str = "How to train your dragon",
        tags: list[str] | None = None,
        description: str = "Ever wonder how?",
        body: str = "You have to believe",
    ) -> dict:
        resp = await async_client.post(
            "/api/articles",
            json={"article": {
                "title": title,
                "description": description,
                "body": body,
                "tagList": tags or [],
            }},
            headers=user["headers"],
        )
        assert resp.status_code == 201, resp.text
        return resp.json()["article"]

    return _create
