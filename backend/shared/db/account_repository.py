"""SQLite-backed account repository."""

from __future__ import annotations

import asyncio
import sqlite3
from typing import TYPE_CHECKING

from shared.auth.models import Account
from shared.dal.account_repository import AccountRepository
from shared.db.connection import translate_error

if TYPE_CHECKING:
    from shared.db.connection import Database


class SqliteAccountRepository(AccountRepository):
    """SQLite implementation of AccountRepository.

    Uses a single INSERT under an asyncio lock and relies on the unique email
    index, so there is no race window between an existence check and the insert.
    """

    def __init__(self, db: Database) -> None:
        self._db = db
        self._lock = asyncio.Lock()

    async def create_account(self, account: Account) -> Account:
        """Insert an account and return it with its assigned id.

        Raises DuplicateKeyError when the email is already registered.
        """
        async with self._lock:
            try:
                cursor = self._db.connection.execute(
                    "INSERT INTO accounts (email, password) VALUES (?, ?)",
                    (account.email, account.password_hash),
                )
                self._db.connection.commit()
            except sqlite3.Error as exc:
                self._db.connection.rollback()
                raise translate_error(exc, "create_account") from exc
        return account.model_copy(update={"account_id": cursor.lastrowid})

    async def get_by_email(self, email: str) -> Account | None:
        """Look up an account by email (case-sensitive)."""
        try:
            row = self._db.connection.execute(
                "SELECT id, email, password FROM accounts WHERE email = ?",
                (email,),
            ).fetchone()
        except sqlite3.Error as exc:
            raise translate_error(exc, "get_account") from exc
        if row is None:
            return None
        return Account(account_id=row[0], email=row[1], password_hash=row[2])
