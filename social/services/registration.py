"""Account registration.

Builds the user from raw credentials, creates it together with its
invitation and hands the plaintext activation token back exactly once.
Delivering the token (email) is up to the caller.
"""

from datetime import timedelta
import logging

from social.models import User
from social.services.security import generate_token, hash_token
from social.stores.storage import UserRepository

logger = logging.getLogger("uvicorn.error")


async def register_user(
    users: UserRepository,
    *,
    username: str,
    email: str,
    password: str,
    invitation_ttl: timedelta,
) -> tuple[User, str]:
    """Register an inactive user.

    Returns:
        The created user and the plaintext activation token.

    Raises:
        DuplicateEmailError / DuplicateUsernameError from the store.
    """
    user = User(username=username, email=email)
    user.set_password(password)

    token = generate_token()
    await users.create_and_invite(user, hash_token(token), invitation_ttl)

    logger.info(f"Registered user {user.id}, invitation valid for {invitation_ttl}")
    return user, token
