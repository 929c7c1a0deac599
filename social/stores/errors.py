"""Classified store failures.

Stores raise these only for outcomes they can tell apart locally (no row
returned, no row affected, a known unique constraint). Every other driver
error, including TimeoutError when a call exceeds its budget, propagates
unchanged.
"""

from sqlalchemy.exc import IntegrityError


class StoreError(RuntimeError):
    pass


class NotFoundError(StoreError):
    def __init__(self, message: str = "record not found") -> None:
        super().__init__(message)


class ConflictError(StoreError):
    def __init__(self, message: str = "record already exists") -> None:
        super().__init__(message)


class VersionConflictError(ConflictError):
    """The row exists but was advanced by another writer."""

    def __init__(self, post_id: int, version: int) -> None:
        super().__init__(f"post {post_id} is no longer at version {version}")
        self.post_id = post_id
        self.version = version


class DuplicateEmailError(StoreError):
    def __init__(self) -> None:
        super().__init__("a user with that email already exists")


class DuplicateUsernameError(StoreError):
    def __init__(self) -> None:
        super().__init__("a user with that username already exists")


# SQLSTATE for unique_violation
_UNIQUE_VIOLATION = "23505"


def is_unique_violation(exc: IntegrityError) -> bool:
    """True when the integrity error is a unique/primary key violation.

    asyncpg exposes the SQLSTATE; SQLite only reports it in the message.
    """
    orig = exc.orig
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if code is not None:
        return code == _UNIQUE_VIOLATION
    message = str(orig)
    return "UNIQUE constraint failed" in message or "duplicate key value" in message


def constraint_name(exc: IntegrityError) -> str | None:
    """Name of the violated constraint, when the driver reports one (asyncpg)."""
    for err in (exc.orig, getattr(exc.orig, "__cause__", None)):
        name = getattr(err, "constraint_name", None)
        if name:
            return name
    return None


def violates(exc: IntegrityError, constraint: str, column: str) -> bool:
    """True when exc is a unique violation of the given constraint.

    Matches the reported constraint name when available. Otherwise only the
    first message line is searched: PostgreSQL quotes the constraint name
    there, SQLite names table.column. Key values (DETAIL) are never matched.
    """
    if not is_unique_violation(exc):
        return False
    name = constraint_name(exc)
    if name is not None:
        return name == constraint
    headline = next(iter(str(exc.orig).splitlines()), "")
    if f"\"{constraint}\"" in headline:
        return True
    _, _, columns = headline.partition("UNIQUE constraint failed:")
    return column in (c.strip() for c in columns.split(","))
