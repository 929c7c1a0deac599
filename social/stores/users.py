"""User store: account lifecycle.

Registration inserts the user and its invitation in one transaction, so a
duplicate email or username never leaves an orphaned invitation behind.
Activation consumes the invitation and flips the user to active.
"""

from datetime import datetime, timedelta, timezone
import logging

from sqlalchemy import delete, update
from sqlalchemy.exc import IntegrityError

from social.models import User, UserInvitation
from social.services.security import hash_token
from social.stores.base import SqlStore
from social.stores.errors import (
    DuplicateEmailError,
    DuplicateUsernameError,
    NotFoundError,
    violates,
)

logger = logging.getLogger("uvicorn.error")

# (constraint name, SQLite table.column)
_EMAIL_UNIQUE = ("users_email_key", "users.email")
_USERNAME_UNIQUE = ("users_username_key", "users.username")


class UserStore(SqlStore):
    async def get_by_id(self, user_id: int, *, timeout: float | None = None) -> User:
        async with self._session(timeout) as session:
            user = await session.get(User, user_id)
        if user is None:
            raise NotFoundError(f"user {user_id} not found")
        return user

    async def create_and_invite(
        self,
        user: User,
        token_hash: str,
        ttl: timedelta,
        *,
        timeout: float | None = None,
    ) -> None:
        """Insert the user and its invitation atomically.

        Populates user.id and user.created_at on success.

        Raises:
            DuplicateEmailError: email already registered.
            DuplicateUsernameError: username already taken.
        """
        try:
            async with self._session(timeout) as session:
                session.add(user)
                await session.flush()

                session.add(
                    UserInvitation(
                        token_hash=token_hash,
                        user_id=user.id,
                        expires_at=datetime.now(timezone.utc) + ttl,
                    )
                )
                await session.flush()
                await session.refresh(user)
        except IntegrityError as e:
            if violates(e, *_EMAIL_UNIQUE):
                logger.warning("Registration rejected: duplicate email")
                raise DuplicateEmailError() from e
            if violates(e, *_USERNAME_UNIQUE):
                logger.warning("Registration rejected: duplicate username")
                raise DuplicateUsernameError() from e
            raise

        logger.info(f"User {user.id} created with pending invitation")

    async def activate(self, token: str, *, timeout: float | None = None) -> None:
        """Redeem a plaintext activation token.

        The invitation is deleted in the same statement that checks its
        expiry, so concurrent redemptions of one token activate at most once.

        Raises:
            NotFoundError: unknown, expired or already redeemed token.
        """
        token_hash = hash_token(token)
        now = datetime.now(timezone.utc)

        async with self._session(timeout) as session:
            result = await session.execute(
                delete(UserInvitation)
                .where(
                    UserInvitation.token_hash == token_hash,
                    UserInvitation.expires_at > now,
                )
                .returning(UserInvitation.user_id)
                .execution_options(synchronize_session=False)
            )
            user_id = result.scalar_one_or_none()
            if user_id is None:
                raise NotFoundError("invitation not found or expired")

            await session.execute(
                update(User)
                .where(User.id == user_id)
                .values(is_active=True)
                .execution_options(synchronize_session=False)
            )

        logger.info(f"User {user_id} activated")
