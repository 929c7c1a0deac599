"""Password and activation token hashing.

- Passwords: bcrypt (salted, slow)
- Activation tokens: random UUID4, persisted as sha256 hex digest only
"""

import hashlib
from uuid import uuid4

import bcrypt

# bcrypt ignores input past 72 bytes; reject instead of silently truncating
MAX_PASSWORD_BYTES = 72


def hash_password(plaintext: str) -> str:
    """Hash a password with a fresh salt."""
    raw = plaintext.encode("utf-8")
    if len(raw) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password longer than {MAX_PASSWORD_BYTES} bytes")
    return bcrypt.hashpw(raw, bcrypt.gensalt()).decode("ascii")


def check_password(plaintext: str, password_hash: str) -> bool:
    raw = plaintext.encode("utf-8")
    if len(raw) > MAX_PASSWORD_BYTES:
        return False
    return bcrypt.checkpw(raw, password_hash.encode("ascii"))


def generate_token() -> str:
    """Generate a plaintext activation token."""
    return str(uuid4())


def hash_token(token: str) -> str:
    """Hash an activation token for storage and lookup.

    Registration and activation must both go through this function.
    """
    return hashlib.sha256(token.encode("utf-8")).hexdigest()
