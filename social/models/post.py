"""Post model.

Posts carry a version number for optimistic concurrency: it starts at 1 and
every successful update bumps it by exactly one.
"""

from datetime import datetime

from sqlalchemy import JSON, DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column

from social.stores.postgres import Base

# text[] on PostgreSQL, JSON list elsewhere (SQLite in tests)
TagList = ARRAY(Text).with_variant(JSON(), "sqlite")


class Post(Base):
    """User-authored post."""

    __tablename__ = "posts"

    id: Mapped[int] = mapped_column(primary_key=True)

    title: Mapped[str] = mapped_column(String(200))
    content: Mapped[str] = mapped_column(Text)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    tags: Mapped[list[str]] = mapped_column(TagList, default=list)

    version: Mapped[int] = mapped_column(Integer, default=1, server_default="1")

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )

    def __repr__(self) -> str:
        return f"<Post {self.id} v{self.version}>"
