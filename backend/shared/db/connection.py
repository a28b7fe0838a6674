"""SQLite database connection and schema management."""

from __future__ import annotations

import os
import sqlite3
from pathlib import Path

import structlog

from shared.dal.errors import DuplicateKeyError, PersistenceError

logger = structlog.get_logger()

_DB_FILE_PERMISSIONS = 0o600

_UNIQUE_VIOLATION = "SQLITE_CONSTRAINT_UNIQUE"

_SCHEMA_SQL = """\
CREATE TABLE IF NOT EXISTS accounts (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    email TEXT NOT NULL,
    password TEXT NOT NULL
);

CREATE UNIQUE INDEX IF NOT EXISTS idx_accounts_email
    ON accounts (email);

CREATE TABLE IF NOT EXISTS questions (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    title TEXT NOT NULL,
    content TEXT NOT NULL,
    tags TEXT,
    account_id INTEGER NOT NULL REFERENCES accounts (id),
    created_on TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE IF NOT EXISTS answers (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    content TEXT NOT NULL,
    question_id INTEGER NOT NULL REFERENCES questions (id) ON DELETE CASCADE,
    account_id INTEGER NOT NULL REFERENCES accounts (id),
    created_on TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
);

CREATE INDEX IF NOT EXISTS idx_answers_question_id
    ON answers (question_id);
"""


class Database:
    """SQLite database wrapper with schema management."""

    def __init__(self, path: str | Path) -> None:
        self._path = str(path)
        self._conn: sqlite3.Connection | None = None

    @property
    def connection(self) -> sqlite3.Connection:
        """Return the active connection or raise if disconnected."""
        if self._conn is None:
            raise RuntimeError("Database is not connected")
        return self._conn

    def connect(self) -> None:
        """Open the database, apply pragmas, create schema, and harden file permissions."""
        parent = Path(self._path).parent
        parent.mkdir(parents=True, exist_ok=True)

        self._conn = sqlite3.connect(self._path, check_same_thread=False)
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.execute("PRAGMA foreign_keys=ON")
        self._conn.execute("PRAGMA busy_timeout=5000")
        self._conn.executescript(_SCHEMA_SQL)

        self._harden_permissions()

    def close(self) -> None:
        """Close the database connection."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def _harden_permissions(self) -> None:
        """Set restrictive file permissions on POSIX systems (best effort).

        WAL/SHM sibling files also contain database content (password hashes).
        """
        if os.name != "posix":  # pragma: no cover
            return
        for suffix in ("", "-wal", "-shm"):
            p = Path(self._path + suffix)
            if p.exists():
                try:
                    p.chmod(_DB_FILE_PERMISSIONS)
                except OSError:
                    logger.warning("could not set file permissions", permissions=oct(_DB_FILE_PERMISSIONS), path=str(p))


def translate_error(exc: sqlite3.Error, operation: str) -> PersistenceError:
    """Log a database failure with full detail and map it to a domain store error.

    Uniqueness violations are recognized from SQLite's extended error name,
    not from the message text.
    """
    code = getattr(exc, "sqlite_errorname", None)
    logger.error("database query failed", operation=operation, code=code, db_message=str(exc))
    if code == _UNIQUE_VIOLATION:
        return DuplicateKeyError(f"{operation}: duplicate key", code=code, constraint=_constraint_name(exc))
    return PersistenceError(f"{operation}: query failed", code=code)


def _constraint_name(exc: sqlite3.Error) -> str | None:
    """Extract the ``table.column`` list SQLite reports for a constraint failure (log detail only)."""
    _, sep, columns = str(exc).partition(": ")
    if not sep:
        return None
    return columns
