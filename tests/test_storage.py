"""Tests for the Storage facade and per-call budgets."""

import asyncio
import dataclasses

import pytest

from social.models import User
from social.stores.base import QUERY_TIMEOUT_SECONDS, SqlStore
from social.stores.comments import CommentStore
from social.stores.followers import FollowerStore
from social.stores.postgres import create_session_factory
from social.stores.posts import PostStore
from social.stores.storage import Storage, new_storage
from social.stores.users import UserStore


def test_new_storage_wires_one_factory_into_every_store(engine):
    storage = new_storage(engine, query_timeout=2.5)

    assert isinstance(storage.posts, PostStore)
    assert isinstance(storage.users, UserStore)
    assert isinstance(storage.comments, CommentStore)
    assert isinstance(storage.followers, FollowerStore)

    stores = [storage.posts, storage.users, storage.comments, storage.followers]
    factories = {id(store._session_factory) for store in stores}
    assert len(factories) == 1
    assert all(store.timeout == 2.5 for store in stores)


def test_default_budget(storage):
    assert storage.posts.timeout == QUERY_TIMEOUT_SECONDS == 5.0


def test_storage_is_immutable(storage):
    with pytest.raises(dataclasses.FrozenInstanceError):
        storage.posts = None


async def test_fake_store_can_be_substituted(storage):
    class RecordingFollowers:
        def __init__(self) -> None:
            self.calls: list[tuple[str, int, int]] = []

        async def follow(self, follower_id, user_id, *, timeout=None):
            self.calls.append(("follow", follower_id, user_id))

        async def unfollow(self, follower_id, user_id, *, timeout=None):
            self.calls.append(("unfollow", follower_id, user_id))

    fake = RecordingFollowers()
    swapped: Storage = dataclasses.replace(storage, followers=fake)

    await swapped.followers.follow(1, 2)
    await swapped.followers.unfollow(1, 2)

    assert fake.calls == [("follow", 1, 2), ("unfollow", 1, 2)]
    assert swapped.posts is storage.posts


class _SlowStore(SqlStore):
    async def insert_then_stall(self, user: User, *, timeout: float | None = None) -> None:
        async with self._session(timeout) as session:
            session.add(user)
            await session.flush()
            await asyncio.sleep(1)


async def test_call_exceeding_budget_times_out_and_rolls_back(engine, count_rows):
    store = _SlowStore(create_session_factory(engine))
    user = User(username="slow", email="slow@x.com", password_hash="placeholder")

    with pytest.raises(TimeoutError):
        await store.insert_then_stall(user, timeout=0.05)

    assert await count_rows(User) == 0


async def test_store_default_budget_applies(engine):
    store = _SlowStore(create_session_factory(engine), timeout=0.05)
    user = User(username="slow", email="slow@x.com", password_hash="placeholder")

    with pytest.raises(TimeoutError):
        await store.insert_then_stall(user)
