"""
MemoPad Backend — Test Configuration (conftest.py)
===================================================

What:  Shared pytest fixtures for the entire test suite.
Why:   Every test gets its own SQLite file, so tests never see each other's memos.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    test_settings ─┬─ memo_store: MemoStore on a fresh database (no HTTP)
                   └─ app: application with its lifespan entered
                        └─ test_client: HTTPX AsyncClient over ASGITransport
"""

import os
import tempfile

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# Override settings for testing BEFORE any app imports
# Why: memopad.main builds a default app at import time from the environment
os.environ["DATABASE_URL"] = (
    "sqlite+aiosqlite:///" + os.path.join(tempfile.mkdtemp(prefix="memopad_test_"), "default.db")
)
os.environ["LOG_LEVEL"] = "WARNING"  # Reduce noise during tests

from memopad.config import Settings  # noqa: E402
from memopad.database import ensure_database_directory  # noqa: E402
from memopad.services.memo_store import MemoStore  # noqa: E402

ALLOWED_ORIGIN = "http://localhost:3000"
OTHER_ALLOWED_ORIGIN = "http://127.0.0.1:8080"


@pytest.fixture
def test_settings(tmp_path):
    """Settings pointing at a database file inside the test's tmp_path."""
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'db' / 'memos.db'}",
        cors_origins=f"{OTHER_ALLOWED_ORIGIN},{ALLOWED_ORIGIN}",
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def memo_store(test_settings):
    """
    Provides a MemoStore with the schema created, closed after the test.

    Usage:
        async def test_insert(memo_store):
            memo = await memo_store.insert("buy milk")
    """
    ensure_database_directory(test_settings.database_url)
    store = MemoStore.from_settings(test_settings)
    await store.create_schema()
    yield store
    await store.close()


@pytest_asyncio.fixture
async def app(test_settings):
    """
    Provides an application whose lifespan has run.

    Why enter the lifespan here: ASGITransport does not send lifespan events,
    and the MemoStore only exists once startup has run.
    """
    from memopad.main import create_app

    application = create_app(test_settings)
    async with application.router.lifespan_context(application):
        yield application


@pytest_asyncio.fixture
async def test_client(app):
    """
    Provides an async HTTP test client for endpoint testing.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/memo/")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
