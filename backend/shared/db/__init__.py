"""SQLite database layer: connection management and repository implementations."""

from shared.db.account_repository import SqliteAccountRepository
from shared.db.connection import Database
from shared.db.content_repository import SqliteContentRepository

__all__ = [
    "Database",
    "SqliteAccountRepository",
    "SqliteContentRepository",
]
