"""Abstract interface for account persistence."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shared.auth.models import Account


class AccountRepository(ABC):
    """Abstract interface for account persistence, keyed by email.

    Implementations must enforce email uniqueness atomically and report a
    violation as DuplicateKeyError.
    """

    @abstractmethod
    async def create_account(self, account: Account) -> Account: ...

    @abstractmethod
    async def get_by_email(self, email: str) -> Account | None: ...
