"""Auth settings: token key, password hasher, and account store location."""

from typing import Literal

from cryptography.fernet import Fernet
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from shared.auth.token import TOKEN_VALIDITY_SECONDS


class AuthSettings(BaseSettings):
    model_config = {"env_prefix": "AUTH_"}

    # Symmetric token key (url-safe base64 of 32 bytes) -- required, no default.
    # The application fails to start if AUTH_TOKEN_KEY is not set or not a valid key.
    token_key: str = Field(min_length=1, repr=False)

    token_validity_seconds: int = Field(default=TOKEN_VALIDITY_SECONDS, gt=0)

    # SQLite database file path
    database_path: str = "backend/storage.db"

    # "argon2" in production; "simple" only for tests
    password_hasher: Literal["argon2", "simple"] = "argon2"

    @field_validator("token_key")
    @classmethod
    def validate_token_key(cls, v: str) -> str:
        try:
            Fernet(v)
        except ValueError as e:
            raise ValueError("token_key must be 32 url-safe base64-encoded bytes") from e
        return v
