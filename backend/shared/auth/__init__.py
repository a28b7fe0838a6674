"""Authentication core: password hashing, session tokens, and the auth service."""

from shared.auth.models import Account, Session
from shared.auth.password import HashingError, PasswordHasher, get_hasher
from shared.auth.service import AccountAlreadyExists, AuthError, AuthService, Unauthorized, WrongPassword
from shared.auth.settings import AuthSettings
from shared.auth.token import TOKEN_VALIDITY_SECONDS, CannotDecryptToken, TokenCodec

__all__ = [
    "TOKEN_VALIDITY_SECONDS",
    "Account",
    "AccountAlreadyExists",
    "AuthError",
    "AuthService",
    "AuthSettings",
    "CannotDecryptToken",
    "HashingError",
    "PasswordHasher",
    "Session",
    "TokenCodec",
    "Unauthorized",
    "WrongPassword",
    "get_hasher",
]
