"""Test fixtures and configuration."""

import os

# Registration/login throttling would trip over the many accounts tests create;
# the rate limit tests switch it back on explicitly.
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ["ENVIRONMENT"] = "testing"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from taskboard.config import Settings
from taskboard.database import Base, init_db
from taskboard.main import create_app
from taskboard.security import issue_token
from tests.factories import UserFactory

# In-memory SQLite by default; point TEST_DATABASE_URL at PostgreSQL
# (postgresql+asyncpg://...) to run the suite against the production dialect.
TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL", "sqlite+aiosqlite://")


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        _env_file=None,
        database_url=TEST_DATABASE_URL,
        secret_key="test-secret-key",
        rate_limit_enabled=False,
        debug=False,
    )


@pytest_asyncio.fixture
async def app(test_settings):
    """Fresh application with an empty schema for each test."""
    application = create_app(test_settings)
    engine = application.state.engine
    await init_db(engine)

    yield application

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_maker(app):
    """Session factory bound to the test app's engine.

    Each helper session commits and closes before the next request runs, so
    data written here is visible to the handlers.
    """
    return app.state.session_maker


def _client(app, headers: dict[str, str] | None = None) -> AsyncClient:
    return AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers=headers,
    )


@pytest.fixture
def auth_headers(test_settings):
    """Build an Authorization header for any user."""

    def _headers(user) -> dict[str, str]:
        token = issue_token(user.id, test_settings)
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest_asyncio.fixture
async def test_user(session_maker):
    async with session_maker() as session:
        return await UserFactory.create_async(session)


@pytest_asyncio.fixture
async def other_user(session_maker):
    async with session_maker() as session:
        return await UserFactory.create_async(session)


@pytest_asyncio.fixture
async def public_client(app):
    """Async test client without auth headers."""
    async with _client(app) as client:
        yield client


@pytest_asyncio.fixture
async def client(app, test_user, auth_headers):
    """Async test client authenticated as test_user."""
    async with _client(app, auth_headers(test_user)) as client:
        yield client


@pytest_asyncio.fixture
async def other_client(app, other_user, auth_headers):
    """Async test client authenticated as other_user."""
    async with _client(app, auth_headers(other_user)) as client:
        yield client
