"""Comment store."""

from sqlalchemy import select

from social.models import Comment
from social.stores.base import SqlStore


class CommentStore(SqlStore):
    async def create(self, comment: Comment, *, timeout: float | None = None) -> None:
        async with self._session(timeout) as session:
            session.add(comment)
            await session.flush()
            await session.refresh(comment)

    async def get_by_post_id(self, post_id: int, *, timeout: float | None = None) -> list[Comment]:
        """All comments of a post, oldest first."""
        async with self._session(timeout) as session:
            result = await session.execute(
                select(Comment)
                .where(Comment.post_id == post_id)
                .order_by(Comment.created_at.asc(), Comment.id.asc())
            )
            return list(result.scalars().all())
