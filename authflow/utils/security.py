"""Security utilities for password hashing and verification.

This module provides bcrypt password hashing through passlib. The user store
is the only caller: use cases hand it plaintext passwords and it decides
whether a value still needs hashing.
"""

from passlib.context import CryptContext

from authflow.core.config.settings import settings

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_WORK_FACTOR,
)


def hash_password(password: str) -> str:
    """Hash a password using bcrypt.

    Args:
        password: Plain text password to hash

    Returns:
        str: Bcrypt-hashed password
    """
    return pwd_context.hash(password)


def verify_password(password: str, hashed_password: str) -> bool:
    """Verify a password against its hash.

    Uses constant-time comparison via bcrypt. Values that are not a
    recognised hash never verify.

    Args:
        password: Plain text password to verify
        hashed_password: Bcrypt hash to verify against

    Returns:
        bool: True if password matches hash
    """
    if not is_password_hash(hashed_password):
        return False
    return pwd_context.verify(password, hashed_password)


def is_password_hash(value: str | None) -> bool:
    """Tell whether `value` is already a hash produced by `pwd_context`."""
    if not value:
        return False
    return pwd_context.identify(value) is not None
