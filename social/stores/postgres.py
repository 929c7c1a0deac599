"""PostgreSQL store with async SQLAlchemy.

Handles:
- Connection pool construction (one engine per process)
- Session factory shared by every store
- Table management for development/testing

The engine is an explicit handle: whoever calls create_engine() owns it and
must dispose it after the last store call.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
import logging
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from social.settings import Settings, get_settings

logger = logging.getLogger("uvicorn.error")


class Base(DeclarativeBase):
    """Base class for SQLAlchemy models."""

    pass


def engine_options(settings: Settings) -> dict[str, Any]:
    """Pool sizing for create_async_engine().

    Idle connections map to the persistent pool, the remainder of the open
    connection ceiling to overflow. Idle connections are recycled after
    db_max_idle_time.
    """
    max_open = settings.db_max_open_conns
    max_idle = min(settings.db_max_idle_conns, max_open)
    return {
        "echo": settings.debug,
        "pool_size": max_idle,
        "max_overflow": max_open - max_idle,
        "pool_recycle": int(settings.db_max_idle_seconds),
        "pool_pre_ping": True,
    }


def create_engine(settings: Settings | None = None) -> AsyncEngine:
    """Create the process-wide connection pool."""
    settings = settings or get_settings()
    return create_async_engine(settings.async_database_url, **engine_options(settings))


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@asynccontextmanager
async def session_scope(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Session context manager: commit on success, rollback on error.

    Usage:
        async with session_scope(factory) as session:
            result = await session.execute(query)
    """
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def ping_db(engine: AsyncEngine) -> None:
    """Fail fast if the database is unreachable."""
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))


async def create_tables(engine: AsyncEngine) -> None:
    """Create all tables (for development/testing only)."""
    # Register every model on Base.metadata
    import social.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def drop_tables(engine: AsyncEngine) -> None:
    """Drop all tables (for testing only)."""
    import social.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
