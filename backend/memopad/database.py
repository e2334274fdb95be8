"""
MemoPad Backend — Database Engine & Dependency Wiring
======================================================

What:  Async SQLAlchemy engine factory, declarative base, and the FastAPI
       dependency that hands the shared MemoStore to route handlers.
Why:   Centralizes all database connection logic in one place.
How:   The application lifespan builds ONE engine (and one MemoStore around it)
       and stores it on `app.state`; handlers receive it via Depends().

Connection Strategy:
    pool_size=1, max_overflow=0:
        Exactly one SQLite connection for the whole process. Requests queue
        for it at checkout; SQLite serializes writes on the file anyway.
    pool_timeout:
        How long a queued request waits for the handle before failing.
"""

from pathlib import Path

from fastapi import Request
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import AsyncAdaptedQueuePool

from memopad.config import Settings


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models (shares one metadata object)."""
    pass


def create_engine(settings: Settings) -> AsyncEngine:
    """
    Build the async engine for the configured SQLite file.

    The pool class is explicit so pool sizing applies regardless of the
    dialect's default pool for file databases.
    """
    return create_async_engine(
        settings.database_url,
        poolclass=AsyncAdaptedQueuePool,
        pool_size=settings.db_pool_size,
        max_overflow=0,
        pool_timeout=settings.db_pool_timeout,
        # Echo SQL queries in DEBUG mode for development visibility
        echo=settings.log_level == "DEBUG",
    )


def ensure_database_directory(database_url: str) -> Path:
    """
    Create the parent directory of the SQLite file if it is missing.

    Returns:
        Resolved path of the database file.
    """
    database = make_url(database_url).database or ""
    path = Path(database)
    path.parent.mkdir(parents=True, exist_ok=True)
    return path.resolve()


# ── Store Dependency ──────────────────────────────────────────────────────
def get_memo_store(request: Request):
    """
    FastAPI dependency returning the MemoStore owned by the running app.

    Example usage in a route:
        @router.get("/")
        async def list_memos(store: MemoStore = Depends(get_memo_store)):
            return await store.list_all()
    """
    return request.app.state.memo_store
