"""
Bulletin Board API — Database Engine & Session Management
==========================================================

What:  Async SQLAlchemy engine factory, declarative bases and the
       per-call session scope.
How:   `create_engine_from_settings()` builds one pooled engine per process
       (owned by AppContainer); `session_scope()` hands out one session per
       data-access call and always returns its connection to the pool.

Connection Pooling:
    pool_size / max_overflow come from settings; pool_pre_ping validates a
    connection before use; pool_recycle=3600 drops connections older than
    an hour. SQLite URLs (tests) skip the pool arguments, which their
    dialect does not accept.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from bulletin.config import Settings

logger = logging.getLogger(__name__)


# ── Base Models ───────────────────────────────────────────────────────────
# One declarative base per schema variant. Both variants map tables named
# `posts` and `responses`, so they cannot share a MetaData object.
class Base(DeclarativeBase):
    """Declarative base for the full schema variant."""
    pass


class ReducedBase(DeclarativeBase):
    """Declarative base for the reduced schema variant."""
    pass


# ── Engine Factory ────────────────────────────────────────────────────────
def create_engine_from_settings(settings: Settings) -> AsyncEngine:
    """
    Create the process-wide async engine.

    Args:
        settings: Application settings (URL parts, pool sizing, ssl mode).

    Returns:
        AsyncEngine with a connection pool; disposed by AppContainer.shutdown().
    """
    url = settings.sqlalchemy_url()

    if url.startswith("sqlite"):
        return create_async_engine(url, echo=settings.log_level == "DEBUG")

    connect_args = {}
    if url.startswith("postgresql+asyncpg") and settings.db_ssl_mode != "disable":
        # asyncpg accepts libpq-style mode names; "require" skips verification
        connect_args["ssl"] = settings.db_ssl_mode

    return create_async_engine(
        url,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=settings.db_pool_pre_ping,
        pool_recycle=3600,
        connect_args=connect_args,
        echo=settings.log_level == "DEBUG",
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Session factory bound to `engine`.

    expire_on_commit=False keeps RETURNING rows readable after commit.
    """
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


# ── Session Scope ─────────────────────────────────────────────────────────
@asynccontextmanager
async def session_scope(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """
    Provide one session for one data-access call.

    How it works:
        1. Creates a new session from the factory (checks out a connection)
        2. Yields it to the caller, which runs its single statement
        3. On success: commits
        4. On error: rolls back and re-raises
        5. Always: closes the session (connection goes back to the pool)

    Example:
        async with session_scope(container.session_factory) as db:
            rows = await db.execute(select(Post))
    """
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def dispose_engine(engine: AsyncEngine) -> None:
    """Close every pooled connection. Called on process shutdown."""
    await engine.dispose()
    logger.info("Database engine disposed")
