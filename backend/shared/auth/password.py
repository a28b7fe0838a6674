"""Password hashing: protocol, argon2id (production), and salted SHA-256 (tests).

Argon2Hasher is memory-hard and CPU-bound, so both hashing and verification
run off the event loop using anyio.to_thread.run_sync() to avoid stalling
unrelated requests.

SimpleHasher uses salted SHA-256 with a "simple$" prefix for instant hashing.
It is intended for tests only.
"""

from __future__ import annotations

import hashlib
import hmac
import secrets
from typing import Protocol, runtime_checkable

from anyio import to_thread
from argon2 import PasswordHasher as _Argon2PasswordHasher
from argon2 import Type
from argon2.exceptions import HashingError as _Argon2HashingError
from argon2.exceptions import VerificationError, VerifyMismatchError

SALT_LENGTH_BYTES = 32


class HashingError(Exception):
    """The password could not be hashed, or a stored hash is malformed."""


@runtime_checkable
class PasswordHasher(Protocol):
    """Hash and verify passwords."""

    async def hash(self, plain: str) -> str: ...

    async def verify(self, plain: str, hashed: str) -> bool: ...


class Argon2Hasher:
    """Production hasher using argon2id (async, off-thread).

    Defaults follow argon2-cffi's RFC 9106 low-memory profile with a 32-byte salt.
    """

    def __init__(
        self,
        *,
        time_cost: int = 3,
        memory_cost: int = 65536,
        parallelism: int = 4,
    ) -> None:
        self._hasher = _Argon2PasswordHasher(
            time_cost=time_cost,
            memory_cost=memory_cost,
            parallelism=parallelism,
            salt_len=SALT_LENGTH_BYTES,
            type=Type.ID,
        )

    async def hash(self, plain: str) -> str:
        encoded = plain.encode("utf-8")
        try:
            return await to_thread.run_sync(lambda: self._hasher.hash(encoded))
        except _Argon2HashingError as e:
            raise HashingError("Cannot hash password") from e

    async def verify(self, plain: str, hashed: str) -> bool:
        """Return False on mismatch; raise HashingError when the stored hash is unusable.

        InvalidHashError and non-ASCII hashes (UnicodeEncodeError) are both ValueErrors.
        """
        encoded = plain.encode("utf-8")
        try:
            return await to_thread.run_sync(lambda: self._hasher.verify(hashed, encoded))
        except VerifyMismatchError:
            return False
        except (VerificationError, ValueError) as e:
            raise HashingError("Cannot verify password") from e


_SIMPLE_PREFIX = "simple"
_SIMPLE_PARTS = 3  # simple$<salt hex>$<digest hex>


class SimpleHasher:
    """Fast salted SHA-256 hasher for tests. Not suitable for production use."""

    async def hash(self, plain: str) -> str:
        salt = secrets.token_bytes(SALT_LENGTH_BYTES)
        return f"{_SIMPLE_PREFIX}${salt.hex()}${_simple_digest(salt, plain)}"

    async def verify(self, plain: str, hashed: str) -> bool:
        parts = hashed.split("$")
        if len(parts) != _SIMPLE_PARTS or parts[0] != _SIMPLE_PREFIX:
            raise HashingError("Cannot verify password")
        try:
            salt = bytes.fromhex(parts[1])
        except ValueError as e:
            raise HashingError("Cannot verify password") from e
        return hmac.compare_digest(parts[2], _simple_digest(salt, plain))


def _simple_digest(salt: bytes, plain: str) -> str:
    return hashlib.sha256(salt + plain.encode("utf-8")).hexdigest()


def get_hasher(name: str = "argon2") -> PasswordHasher:
    """Return a PasswordHasher by name ("argon2" or "simple")."""
    if name == "argon2":
        return Argon2Hasher()
    if name == "simple":
        return SimpleHasher()
    raise ValueError(f"Unknown password hasher: {name!r}")
