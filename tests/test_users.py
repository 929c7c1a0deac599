"""Tests for UserStore: registration with invitation and activation."""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from social.models import User, UserInvitation
from social.services.registration import register_user
from social.services.security import hash_token
from social.stores.errors import DuplicateEmailError, DuplicateUsernameError, NotFoundError
from social.stores.postgres import create_session_factory


async def test_get_by_id_missing_raises_not_found(storage):
    with pytest.raises(NotFoundError):
        await storage.users.get_by_id(404)


async def test_create_and_invite_populates_user_and_invitation(storage, engine):
    user = User(username="alice", email="alice@x.com", password_hash="placeholder")
    await storage.users.create_and_invite(user, "abc123", timedelta(hours=2))

    assert user.id is not None
    assert user.created_at is not None
    assert user.is_active is False

    async with create_session_factory(engine)() as session:
        invitation = await session.get(UserInvitation, "abc123")
    assert invitation is not None
    assert invitation.user_id == user.id

    expires_at = invitation.expires_at
    if expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=timezone.utc)
    assert expires_at > datetime.now(timezone.utc) + timedelta(hours=1)

    stored = await storage.users.get_by_id(user.id)
    assert stored.username == "alice"


async def test_duplicate_email_leaves_no_partial_rows(storage, make_user, count_rows):
    await make_user("alice")

    clash = User(username="alice2", email="alice@x.com", password_hash="placeholder")
    with pytest.raises(DuplicateEmailError):
        await storage.users.create_and_invite(clash, "other-hash", timedelta(hours=1))

    assert await count_rows(User) == 1
    assert await count_rows(UserInvitation) == 1


async def test_duplicate_username_is_classified(storage, make_user, count_rows):
    await make_user("alice")

    clash = User(username="alice", email="someone-else@x.com", password_hash="placeholder")
    with pytest.raises(DuplicateUsernameError):
        await storage.users.create_and_invite(clash, "other-hash", timedelta(hours=1))

    assert await count_rows(User) == 1
    assert await count_rows(UserInvitation) == 1


async def test_activate_succeeds_exactly_once(storage, count_rows):
    user, token = await register_user(
        storage.users,
        username="alice",
        email="alice@x.com",
        password="s3cret-pass",
        invitation_ttl=timedelta(days=3),
    )

    await storage.users.activate(token)
    assert (await storage.users.get_by_id(user.id)).is_active is True
    assert await count_rows(UserInvitation) == 0

    with pytest.raises(NotFoundError):
        await storage.users.activate(token)


async def test_activate_expired_token_does_not_touch_user(storage, engine, count_rows):
    token = "expired-token"
    user = User(username="bob", email="bob@x.com", password_hash="placeholder")
    await storage.users.create_and_invite(user, hash_token(token), timedelta(seconds=-1))

    with pytest.raises(NotFoundError):
        await storage.users.activate(token)

    assert (await storage.users.get_by_id(user.id)).is_active is False
    assert await count_rows(UserInvitation) == 1


async def test_activate_unknown_token(storage, make_user):
    await make_user("carol")
    with pytest.raises(NotFoundError):
        await storage.users.activate("never-issued")


async def test_activate_only_touches_the_bound_user(storage, engine):
    first = User(username="dave", email="dave@x.com", password_hash="placeholder")
    second = User(username="erin", email="erin@x.com", password_hash="placeholder")
    await storage.users.create_and_invite(first, hash_token("t-dave"), timedelta(hours=1))
    await storage.users.create_and_invite(second, hash_token("t-erin"), timedelta(hours=1))

    await storage.users.activate("t-erin")

    async with create_session_factory(engine)() as session:
        result = await session.execute(select(User.username, User.is_active).order_by(User.id))
        states = dict(result.all())
    assert states == {"dave": False, "erin": True}


async def test_not_null_failure_is_not_classified_as_duplicate(storage, count_rows):
    user = User(username="nomail", email=None, password_hash="placeholder")

    with pytest.raises(IntegrityError) as exc_info:
        await storage.users.create_and_invite(user, "nomail-hash", timedelta(hours=1))
    assert not isinstance(exc_info.value, DuplicateEmailError)

    assert await count_rows(User) == 0
    assert await count_rows(UserInvitation) == 0
