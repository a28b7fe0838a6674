"""Account model for Starlette AuthenticationMiddleware integration."""

from __future__ import annotations

from typing import TYPE_CHECKING

from starlette.authentication import BaseUser

if TYPE_CHECKING:
    from shared.auth.models import Session


class AuthenticatedAccount(BaseUser):
    """Authenticated account for Starlette's request.user.

    Wraps the session decoded from this request's token; it lives only as
    long as the request.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    @property
    def is_authenticated(self) -> bool:  # pragma: no cover
        return True

    @property
    def display_name(self) -> str:  # pragma: no cover
        return str(self._session.account_id)

    @property
    def identity(self) -> str:  # pragma: no cover
        return str(self._session.account_id)

    @property
    def account_id(self) -> int:
        return self._session.account_id

    @property
    def session(self) -> Session:
        return self._session
