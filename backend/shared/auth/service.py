"""Auth service coordinating registration, login, and token validation."""

from __future__ import annotations

import secrets
from typing import TYPE_CHECKING

import structlog

from shared.auth.models import Account
from shared.dal.errors import DuplicateKeyError

if TYPE_CHECKING:
    from shared.auth.models import Session
    from shared.auth.password import PasswordHasher
    from shared.auth.token import TokenCodec
    from shared.dal.account_repository import AccountRepository

logger = structlog.get_logger()


class AuthError(Exception):
    """Authentication or authorization failure."""


class WrongPassword(AuthError):
    """Credentials did not match. Also raised for unknown emails to avoid account enumeration."""


class AccountAlreadyExists(AuthError):
    """Registration hit the store's unique email constraint."""


class Unauthorized(AuthError):
    """Authenticated account does not own the resource it tried to change."""


class AuthService:
    """Coordinate account registration, login, and token validation."""

    def __init__(
        self,
        account_repo: AccountRepository,
        token_codec: TokenCodec,
        *,
        password_hasher: PasswordHasher,
    ) -> None:
        self._account_repo = account_repo
        self._token_codec = token_codec
        self._hasher = password_hasher
        self._dummy_hash: str | None = None

    async def register(self, email: str, password: str) -> Account:
        """Hash the password and persist a new account.

        Raises AccountAlreadyExists on a duplicate email, HashingError when
        the password cannot be hashed, PersistenceError on other store failures.
        """
        password_hash = await self._hasher.hash(password)
        account = Account(email=email, password_hash=password_hash)
        try:
            saved = await self._account_repo.create_account(account)
        except DuplicateKeyError as e:
            logger.warning("registration rejected, account exists", constraint=e.constraint)
            raise AccountAlreadyExists("Account already exists") from e
        logger.info("account registered", account_id=saved.account_id)
        return saved

    async def login(self, email: str, password: str) -> str:
        """Verify credentials and return an encrypted session token.

        Raises WrongPassword for a mismatch or an unknown email, HashingError
        when the stored hash cannot be verified.
        """
        account = await self._account_repo.get_by_email(email)
        if account is None or account.account_id is None:
            await self._verify_against_dummy(password)
            logger.warning("login failed", reason="unknown account")
            raise WrongPassword("Wrong E-mail/Password combination")
        if not await self._hasher.verify(password, account.password_hash):
            logger.warning("login failed", reason="wrong password", account_id=account.account_id)
            raise WrongPassword("Wrong E-mail/Password combination")
        return self._token_codec.issue(account.account_id)

    async def _verify_against_dummy(self, password: str) -> None:
        """Spend the same hashing work on an unknown email as on a known one.

        The dummy hash is made once per service with the configured hasher, so
        its cost parameters match the stored hashes.
        """
        if self._dummy_hash is None:
            self._dummy_hash = await self._hasher.hash(secrets.token_urlsafe(32))
        await self._hasher.verify(password, self._dummy_hash)

    def authenticate(self, token: str) -> Session:
        """Decode a presented token. Raises CannotDecryptToken on any failure."""
        return self._token_codec.decode(token)
