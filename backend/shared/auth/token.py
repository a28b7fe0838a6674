"""Encrypted session tokens issued at login and presented on protected requests.

Claims are serialized to JSON and sealed with Fernet (AES-128-CBC with a
random IV, authenticated by HMAC-SHA256), so tokens are opaque to clients and
any bit-level tampering fails decryption. The key is injected at construction
and never derived from request data.

Every decoding failure, including expiry, surfaces as CannotDecryptToken so
callers cannot tell which check failed. The specific reason is logged at
debug level.
"""

from __future__ import annotations

import math
import time
from typing import TYPE_CHECKING

import structlog
from cryptography.fernet import Fernet, InvalidToken
from pydantic import ValidationError

from shared.auth.models import Session

if TYPE_CHECKING:
    from collections.abc import Callable

logger = structlog.get_logger()

TOKEN_VALIDITY_SECONDS = 86400  # 24 hours


class CannotDecryptToken(Exception):
    """Token is missing, tampered, malformed, not yet valid, or expired."""


class TokenCodec:
    """Issue and decode session tokens with a process-wide symmetric key."""

    def __init__(
        self,
        key: str | bytes,
        *,
        validity_seconds: int = TOKEN_VALIDITY_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._fernet = Fernet(key)
        self._validity_seconds = validity_seconds
        self._clock = clock

    @property
    def validity_seconds(self) -> int:
        return self._validity_seconds

    def issue(self, account_id: int, *, now: float | None = None) -> str:
        """Build claims for ``account_id`` and return the encrypted token."""
        if now is None:
            now = self._clock()
        session = Session(
            account_id=account_id,
            issued_at=now,
            not_before=now,
            expires_at=now + self._validity_seconds,
        )
        payload = session.model_dump_json().encode()
        return self._fernet.encrypt_at_time(payload, int(now)).decode("ascii")

    def decode(self, token: str, *, now: float | None = None) -> Session:
        """Decrypt and validate a token. Raises CannotDecryptToken on any failure."""
        if now is None:
            now = self._clock()

        try:
            payload = self._fernet.decrypt(token.encode("ascii"))
        except (InvalidToken, UnicodeEncodeError) as e:
            logger.debug("session token failed authentication")
            raise CannotDecryptToken from e

        try:
            session = Session.model_validate_json(payload)
        except ValidationError as e:
            logger.debug("session token malformed claims")
            raise CannotDecryptToken from e

        if not self._claims_are_consistent(session):
            raise CannotDecryptToken

        if not session.is_active(now):
            logger.debug("session token outside validity window", account_id=session.account_id)
            raise CannotDecryptToken

        return session

    def _claims_are_consistent(self, session: Session) -> bool:
        """Check timestamps are finite and describe a lifetime no longer than the configured window."""
        timestamps = (session.issued_at, session.not_before, session.expires_at)
        if not all(math.isfinite(t) for t in timestamps):
            logger.debug("session token non-finite timestamp")
            return False

        if session.expires_at <= session.issued_at:
            logger.debug("session token expires_at <= issued_at")
            return False

        if session.expires_at - session.issued_at > self._validity_seconds:
            logger.debug("session token lifetime too long")
            return False

        return True
