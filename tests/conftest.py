"""Shared fixtures.

Stores run against in-memory SQLite (aiosqlite) with foreign keys enabled,
so ON DELETE CASCADE and FK violations behave like PostgreSQL.
"""

from collections.abc import Awaitable, Callable
from datetime import timedelta
import itertools

import pytest
from sqlalchemy import event, func, select
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import StaticPool

from social.models import Post, User
from social.stores.postgres import create_session_factory, create_tables
from social.stores.storage import Storage, new_storage


@pytest.fixture
async def engine():
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)

    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def storage(engine: AsyncEngine) -> Storage:
    return new_storage(engine)


@pytest.fixture
def count_rows(engine: AsyncEngine) -> Callable[[type], Awaitable[int]]:
    """Count rows of a model's table outside the stores."""
    session_factory = create_session_factory(engine)

    async def _count(model: type) -> int:
        async with session_factory() as session:
            return await session.scalar(select(func.count()).select_from(model))

    return _count


@pytest.fixture
def make_user(storage: Storage) -> Callable[..., Awaitable[User]]:
    """Create an inactive user with a placeholder password hash (skips bcrypt)."""
    counter = itertools.count(1)

    async def _make(username: str | None = None) -> User:
        username = username or f"user{next(counter)}"
        user = User(username=username, email=f"{username}@x.com", password_hash="placeholder")
        await storage.users.create_and_invite(user, f"hash-{username}", timedelta(hours=1))
        return user

    return _make


@pytest.fixture
def make_post(storage: Storage) -> Callable[..., Awaitable[Post]]:
    async def _make(user: User, title: str = "hello", tags: list[str] | None = None) -> Post:
        post = Post(title=title, content=f"{title} body", user_id=user.id, tags=tags or [])
        await storage.posts.create(post)
        return post

    return _make
