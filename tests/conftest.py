"""
Shared fixtures: an app wired to a throwaway SQLite database.
"""

from typing import AsyncIterator

import httpx
import pytest
import pytest_asyncio

from auth.tokens import TokenService
from config.settings import Settings
from database.session import build_engine, build_session_factory, ensure_schema
from main import create_app

TEST_SECRET = "test-secret"


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'chat.db'}",
        jwt_secret=TEST_SECRET,
        bcrypt_rounds=4,
        _env_file=None,
    )


@pytest.fixture
def tokens() -> TokenService:
    return TokenService(TEST_SECRET)


@pytest_asyncio.fixture
async def app(settings):
    app = create_app(settings)
    # ASGITransport does not run the lifespan, so bootstrap the schema here.
    await ensure_schema(app.state.engine)
    yield app
    await app.state.engine.dispose()


@pytest_asyncio.fixture
async def client(app) -> AsyncIterator[httpx.AsyncClient]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest_asyncio.fixture
async def session_factory(settings):
    """Session factory for store-level tests, without the HTTP layer."""
    engine = build_engine(settings)
    await ensure_schema(engine)
    yield build_session_factory(engine)
    await engine.dispose()
