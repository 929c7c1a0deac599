"""Storage facade.

Callers get a Storage value and reach every entity through its narrow
contract. The facade holds stores by contract type so alternate
implementations (e.g. test fakes) can be swapped in.
"""

from dataclasses import dataclass
from datetime import timedelta
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncEngine

from social.models import Comment, Post, User
from social.stores.base import QUERY_TIMEOUT_SECONDS
from social.stores.comments import CommentStore
from social.stores.followers import FollowerStore
from social.stores.postgres import create_session_factory
from social.stores.posts import FeedEntry, PostStore
from social.stores.users import UserStore


class PostRepository(Protocol):
    async def get_by_id(self, post_id: int, *, timeout: float | None = None) -> Post: ...

    async def create(self, post: Post, *, timeout: float | None = None) -> None: ...

    async def delete(self, post_id: int, *, timeout: float | None = None) -> None: ...

    async def update(self, post: Post, *, timeout: float | None = None) -> int: ...

    async def get_user_feed(self, user_id: int, *, timeout: float | None = None) -> list[FeedEntry]: ...


class UserRepository(Protocol):
    async def get_by_id(self, user_id: int, *, timeout: float | None = None) -> User: ...

    async def create_and_invite(
        self,
        user: User,
        token_hash: str,
        ttl: timedelta,
        *,
        timeout: float | None = None,
    ) -> None: ...

    async def activate(self, token: str, *, timeout: float | None = None) -> None: ...


class CommentRepository(Protocol):
    async def create(self, comment: Comment, *, timeout: float | None = None) -> None: ...

    async def get_by_post_id(self, post_id: int, *, timeout: float | None = None) -> list[Comment]: ...


class FollowerRepository(Protocol):
    async def follow(self, follower_id: int, user_id: int, *, timeout: float | None = None) -> None: ...

    async def unfollow(self, follower_id: int, user_id: int, *, timeout: float | None = None) -> None: ...


@dataclass(frozen=True)
class Storage:
    posts: PostRepository
    users: UserRepository
    comments: CommentRepository
    followers: FollowerRepository


def new_storage(engine: AsyncEngine, *, query_timeout: float = QUERY_TIMEOUT_SECONDS) -> Storage:
    """Wire one session factory over the shared engine into every store.

    query_timeout is the budget applied to calls that don't pass their own.
    The engine stays owned by the caller.
    """
    session_factory = create_session_factory(engine)
    return Storage(
        posts=PostStore(session_factory, timeout=query_timeout),
        users=UserStore(session_factory, timeout=query_timeout),
        comments=CommentStore(session_factory, timeout=query_timeout),
        followers=FollowerStore(session_factory, timeout=query_timeout),
    )
