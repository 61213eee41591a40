"""Password hashing and verification."""

from __future__ import annotations

from functools import lru_cache

from argon2 import PasswordHasher, exceptions as argon_exc


@lru_cache
def _hasher(work_factor: int) -> PasswordHasher:
    return PasswordHasher(time_cost=work_factor)


def hash_password(password: str, work_factor: int) -> str:
    """Create a salted Argon2 digest; work_factor is the Argon2 time cost."""
    return _hasher(work_factor).hash(password)


def verify_password(password: str, stored_hash: str | None) -> bool:
    stored = stored_hash or ""
    if not stored:
        return False
    try:
        # Parameters are read from the digest itself, any hasher verifies it.
        return _hasher(1).verify(stored, password)
    except (argon_exc.VerifyMismatchError, argon_exc.VerificationError, argon_exc.InvalidHashError):
        return False


def needs_rehash(stored_hash: str, work_factor: int) -> bool:
    """True when the digest was produced with parameters other than the configured ones."""
    try:
        return _hasher(work_factor).check_needs_rehash(stored_hash)
    except argon_exc.InvalidHashError:
        return True
