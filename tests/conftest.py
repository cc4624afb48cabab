"""
Album API: Test Configuration (conftest.py)
============================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixtures:
    memory_store:  Fresh MemoryAlbumStore seeded with the sample catalogue
    sqlite_engine: AsyncEngine on a temp SQLite file with the album table created
    db_store:      DatabaseAlbumStore over sqlite_engine
    test_client:   HTTPX AsyncClient talking to an app serving memory_store
    db_client:     HTTPX AsyncClient talking to an app serving db_store
"""

import os

# Environment overrides must be in place before album_api.config is imported
os.environ["ALBUM_STORE"] = "memory"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ.pop("DATABASE_URL", None)

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from album_api.database import Base, build_engine
from album_api.main import create_app
from album_api.schemas.album import AlbumCreate
from album_api.services.database_store import DatabaseAlbumStore
from album_api.services.memory_store import MemoryAlbumStore


@pytest.fixture
def sample_album():
    """The album used in the POST example scenario."""
    return AlbumCreate(title="Kind of Blue", artist="Miles Davis", price=29.99)


@pytest.fixture
def memory_store():
    return MemoryAlbumStore()


@pytest.fixture
def sqlite_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'albums.db'}"


@pytest_asyncio.fixture
async def sqlite_engine(sqlite_url):
    """
    Provides an engine on a fresh SQLite database with the album table.

    Disposed after the test so the temp file can be removed.
    """
    engine = build_engine(sqlite_url)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def db_store(sqlite_engine):
    return DatabaseAlbumStore(sqlite_engine)


@pytest_asyncio.fixture
async def test_client(memory_store):
    """
    Provides an async HTTP client for endpoint testing.

    Uses ASGITransport to route requests directly to the app; the store is
    injected, so the lifespan is not needed.
    """
    app = create_app(store=memory_store)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def db_client(db_store):
    app = create_app(store=db_store)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
