"""Post store: CRUD, optimistic-concurrency updates and the user feed.

Updates are conditional writes matched on (id, version). A stale version
never mutates the row; the caller must re-fetch and resubmit.
"""

from dataclasses import dataclass
import logging

from sqlalchemy import delete, func, or_, select, update

from social.models import Comment, Follower, Post, User
from social.stores.base import SqlStore
from social.stores.errors import NotFoundError, VersionConflictError

logger = logging.getLogger("uvicorn.error")


@dataclass
class FeedEntry:
    """Post annotated for feed display. Recomputed per request, never stored."""

    post: Post
    username: str
    comment_count: int


class PostStore(SqlStore):
    async def create(self, post: Post, *, timeout: float | None = None) -> None:
        """Insert a post; populates id, version and both timestamps."""
        async with self._session(timeout) as session:
            session.add(post)
            await session.flush()
            await session.refresh(post)

    async def get_by_id(self, post_id: int, *, timeout: float | None = None) -> Post:
        async with self._session(timeout) as session:
            post = await session.get(Post, post_id)
        if post is None:
            raise NotFoundError(f"post {post_id} not found")
        return post

    async def delete(self, post_id: int, *, timeout: float | None = None) -> None:
        """Delete a post. Its comments are removed by ON DELETE CASCADE."""
        async with self._session(timeout) as session:
            result = await session.execute(
                delete(Post)
                .where(Post.id == post_id)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                raise NotFoundError(f"post {post_id} not found")

    async def update(self, post: Post, *, timeout: float | None = None) -> int:
        """Write title/content/tags if the stored version equals post.version.

        On success post.version and post.updated_at are refreshed and the new
        version is returned.

        Raises:
            NotFoundError: the post does not exist.
            VersionConflictError: another writer already advanced the version.
        """
        async with self._session(timeout) as session:
            result = await session.execute(
                update(Post)
                .where(Post.id == post.id, Post.version == post.version)
                .values(
                    title=post.title,
                    content=post.content,
                    tags=list(post.tags or []),
                    version=Post.version + 1,
                    updated_at=func.now(),
                )
                .returning(Post.version, Post.updated_at)
                .execution_options(synchronize_session=False)
            )
            row = result.one_or_none()
            if row is None:
                exists = await session.scalar(select(Post.id).where(Post.id == post.id))
                if exists is None:
                    raise NotFoundError(f"post {post.id} not found")
                logger.warning(f"Stale update rejected for post {post.id} at version {post.version}")
                raise VersionConflictError(post.id, post.version)

        post.version, post.updated_at = row
        return post.version

    async def get_user_feed(self, user_id: int, *, timeout: float | None = None) -> list[FeedEntry]:
        """Posts by user_id and by everyone user_id follows, newest first.

        Ties on created_at are broken by id, newest first. Unpaginated.
        """
        followees = select(Follower.user_id).where(Follower.follower_id == user_id)
        comment_counts = (
            select(Comment.post_id, func.count(Comment.id).label("comment_count"))
            .group_by(Comment.post_id)
            .subquery()
        )

        query = (
            select(
                Post,
                User.username,
                func.coalesce(comment_counts.c.comment_count, 0),
            )
            .join(User, User.id == Post.user_id)
            .outerjoin(comment_counts, comment_counts.c.post_id == Post.id)
            .where(or_(Post.user_id == user_id, Post.user_id.in_(followees)))
            .order_by(Post.created_at.desc(), Post.id.desc())
        )

        async with self._session(timeout) as session:
            result = await session.execute(query)
            rows = result.all()

        return [
            FeedEntry(post=post, username=username, comment_count=int(count))
            for post, username, count in rows
        ]
