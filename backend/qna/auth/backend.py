"""Starlette AuthenticationBackend that turns the Authorization header into a session."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from starlette.authentication import AuthCredentials, AuthenticationBackend

from qna.auth.models import AuthenticatedAccount
from shared.auth.token import CannotDecryptToken

if TYPE_CHECKING:
    from starlette.requests import HTTPConnection

    from shared.auth.service import AuthService

logger = structlog.get_logger()

_BEARER_PREFIX = "bearer "


class TokenAuthBackend(AuthenticationBackend):
    """Authenticate requests from the raw token in the ``Authorization`` header.

    A ``Bearer`` scheme prefix is accepted but not required. Requests without
    the header, or with a token that fails to decode, stay unauthenticated;
    protected routes then reject them with 401 before the handler runs.
    """

    def __init__(self, auth_service: AuthService) -> None:
        self._auth_service = auth_service

    async def authenticate(
        self,
        conn: HTTPConnection,
    ) -> tuple[AuthCredentials, AuthenticatedAccount] | None:
        token = extract_token(conn.headers.get("authorization"))
        if token is None:
            return None

        try:
            session = self._auth_service.authenticate(token)
        except CannotDecryptToken:
            logger.warning("rejected session token", path=conn.url.path)
            return None

        return AuthCredentials(["authenticated"]), AuthenticatedAccount(session)


def extract_token(header: str | None) -> str | None:
    """Return the token carried by an Authorization header value, or None when absent/empty."""
    if header is None:
        return None
    value = header.strip()
    if value.lower().startswith(_BEARER_PREFIX):
        value = value[len(_BEARER_PREFIX) :].strip()
    return value or None
