"""User and invitation models.

A user is created inactive together with one invitation. The invitation
holds only the sha256 of the activation token; the plaintext is returned
to the caller once at registration.
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, String, UniqueConstraint, false, func
from sqlalchemy.orm import Mapped, mapped_column

from social.services.security import check_password, hash_password
from social.stores.postgres import Base


class User(Base):
    """Account with a bcrypt password hash and activation flag."""

    __tablename__ = "users"
    __table_args__ = (
        # Constraint names are used to classify duplicate registrations
        UniqueConstraint("username", name="users_username_key"),
        UniqueConstraint("email", name="users_email_key"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)

    username: Mapped[str] = mapped_column(String(100))
    email: Mapped[str] = mapped_column(String(255))
    password_hash: Mapped[str] = mapped_column(String(100))

    is_active: Mapped[bool] = mapped_column(Boolean, default=False, server_default=false())

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )

    def set_password(self, plaintext: str) -> None:
        self.password_hash = hash_password(plaintext)

    def check_password(self, plaintext: str) -> bool:
        return check_password(plaintext, self.password_hash)

    def __repr__(self) -> str:
        return f"<User {self.username} ({'active' if self.is_active else 'inactive'})>"


class UserInvitation(Base):
    """One-time activation token bound to a user."""

    __tablename__ = "user_invitations"

    # sha256 hex digest of the plaintext token
    token_hash: Mapped[str] = mapped_column(String(64), primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))

    def __repr__(self) -> str:
        return f"<UserInvitation user={self.user_id} expires={self.expires_at:%Y-%m-%d %H:%M}>"
