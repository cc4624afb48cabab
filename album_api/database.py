"""
Album API: Database Engine Management
======================================

What:  Async SQLAlchemy engine construction, connectivity check and disposal.
How:   build_engine() creates an async engine with connection pooling from
       settings; verify_connection() runs SELECT 1 under a deadline during
       startup; the database store borrows pooled connections per operation.
Who:   Called by the application lifespan (main.py), alembic and tests.
When:  Once at server startup; the engine lives until shutdown.

Connection Pooling:
    pool_size / max_overflow:  Persistent connections plus burst headroom
    pool_pre_ping:             Validates connections before use
    pool_recycle=3600:         Recycles connections every hour

    SQLite URLs (used by the test suite through aiosqlite) get SQLAlchemy's
    default pool for the dialect; the sizing options do not apply there.
"""

import asyncio
import logging
from typing import Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from album_api.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares a single metadata object, which alembic reads for migrations.
    """
    pass


# ── Engine Construction ───────────────────────────────────────────────────
def build_engine(
    url: Optional[str] = None,
    config: Optional[Settings] = None,
) -> AsyncEngine:
    """
    Create the async engine that owns the connection pool.

    Args:
        url:     Explicit SQLAlchemy URL; defaults to config.sqlalchemy_url
        config:  Settings to read pool options from; defaults to the singleton

    Returns:
        AsyncEngine. No connection is opened until first use.
    """
    config = config or default_settings
    url = url or config.sqlalchemy_url

    options = {
        "echo": config.log_level == "DEBUG",
    }
    if not url.startswith("sqlite"):
        options.update(
            pool_size=config.db_pool_size,
            max_overflow=config.db_max_overflow,
            pool_pre_ping=config.db_pool_pre_ping,
            pool_recycle=3600,
        )
    if url.startswith("postgresql+asyncpg"):
        # Server-side statement timeout for every query issued through the pool
        options["connect_args"] = {"command_timeout": config.request_timeout}

    return create_async_engine(url, **options)


async def verify_connection(engine: AsyncEngine, timeout: float) -> None:
    """
    Open one pooled connection and run SELECT 1.

    What:   Startup connectivity check; the service must not start serving
            without a working database.
    Raises: Whatever the driver raises (wrapped by SQLAlchemy), or
            asyncio.TimeoutError when the check exceeds `timeout` seconds.
    """

    async def _ping() -> None:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    await asyncio.wait_for(_ping(), timeout=timeout)
    logger.info("Connected to database at %s", engine.url.render_as_string(hide_password=True))


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def dispose_engine(engine: AsyncEngine) -> None:
    """
    What:  Gracefully closes all connections in the pool.
    When:  Called during application shutdown (via the store's close()).
    """
    await engine.dispose()
