"""Account and session models for authentication."""

from pydantic import BaseModel, Field


class Account(BaseModel, frozen=True):
    """Account stored in the account repository.

    ``account_id`` is assigned by the store and is None before the account is persisted.
    """

    account_id: int | None = None
    email: str
    password_hash: str = Field(repr=False)  # argon2id PHC string, never the raw password


class Session(BaseModel, frozen=True):
    """Decoded, time-bounded claims identifying an authenticated account.

    Built from a token on every authenticated request and never persisted.
    """

    account_id: int
    issued_at: float
    not_before: float
    expires_at: float

    def is_active(self, now: float) -> bool:
        """Return True when ``now`` falls within [not_before, expires_at)."""
        return self.not_before <= now < self.expires_at
