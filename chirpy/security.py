"""Password hashing helpers for Chirpy accounts."""
from __future__ import annotations

from passlib.context import CryptContext

# bcrypt only looks at the first 72 bytes of the secret.
_BCRYPT_MAX_BYTES = 72

_pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=4)


class HashingError(RuntimeError):
    """Raised when a password cannot be hashed."""


def hash_password(password: str) -> str:
    """Return a salted bcrypt digest for ``password``."""

    if len(password.encode("utf-8")) > _BCRYPT_MAX_BYTES:
        raise HashingError(f"Password exceeds {_BCRYPT_MAX_BYTES} bytes")
    try:
        return _pwd_context.hash(password)
    except (ValueError, TypeError) as exc:
        raise HashingError(f"Hashing password failed: {exc}") from exc


def verify_password(password: str, hashed: str) -> bool:
    """Return ``True`` if ``password`` matches the stored ``hashed`` digest."""

    if not hashed or len(password.encode("utf-8")) > _BCRYPT_MAX_BYTES:
        return False
    try:
        return _pwd_context.verify(password, hashed)
    except (ValueError, TypeError):
        return False


def dummy_verify() -> None:
    """Spend the cost of one verification without checking anything."""

    _pwd_context.dummy_verify()


__all__ = ["HashingError", "dummy_verify", "hash_password", "verify_password"]
