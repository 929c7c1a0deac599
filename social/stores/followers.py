"""Follower store: directed follow edges."""

import logging

from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError

from social.models import Follower
from social.stores.base import SqlStore
from social.stores.errors import ConflictError, is_unique_violation

logger = logging.getLogger("uvicorn.error")


class FollowerStore(SqlStore):
    async def follow(self, follower_id: int, user_id: int, *, timeout: float | None = None) -> None:
        """Make follower_id follow user_id.

        Raises:
            ConflictError: the edge already exists.
        """
        try:
            async with self._session(timeout) as session:
                session.add(Follower(follower_id=follower_id, user_id=user_id))
                await session.flush()
        except IntegrityError as e:
            if is_unique_violation(e):
                logger.warning(f"User {follower_id} already follows {user_id}")
                raise ConflictError(f"user {follower_id} already follows {user_id}") from e
            raise

    async def unfollow(self, follower_id: int, user_id: int, *, timeout: float | None = None) -> None:
        """Remove the edge if present. Missing edges are not an error."""
        async with self._session(timeout) as session:
            await session.execute(
                delete(Follower)
                .where(Follower.follower_id == follower_id, Follower.user_id == user_id)
                .execution_options(synchronize_session=False)
            )
