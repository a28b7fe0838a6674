"""SQLite-backed question and answer repository."""

from __future__ import annotations

import asyncio
import json
import sqlite3
from typing import TYPE_CHECKING, Any

from shared.dal.content_repository import ContentRepository
from shared.dal.models import Answer, Question
from shared.db.connection import translate_error

if TYPE_CHECKING:
    from shared.dal.models import NewAnswer, NewQuestion
    from shared.db.connection import Database


class SqliteContentRepository(ContentRepository):
    """SQLite implementation of ContentRepository.

    Writes are serialized by an asyncio lock. Updates and deletes carry
    ``account_id = ?`` in their WHERE clause so ownership is enforced by the
    statement itself, not only by the caller's earlier ownership check.
    """

    def __init__(self, db: Database) -> None:
        self._db = db
        self._lock = asyncio.Lock()

    # -- questions --

    async def list_questions(self, limit: int | None = None, offset: int = 0) -> list[Question]:
        """Return questions in id order. ``limit=None`` returns all rows after ``offset``."""
        rows = self._query(
            "list_questions",
            "SELECT id, title, content, tags FROM questions ORDER BY id LIMIT ? OFFSET ?",
            (-1 if limit is None else limit, offset),
        ).fetchall()
        return [_question_from_row(row) for row in rows]

    async def add_question(self, question: NewQuestion, account_id: int) -> Question:
        async with self._lock:
            cursor = self._write(
                "add_question",
                "INSERT INTO questions (title, content, tags, account_id) VALUES (?, ?, ?, ?)",
                (question.title, question.content, _dump_tags(question.tags), account_id),
            )
        return Question(id=cursor.lastrowid, title=question.title, content=question.content, tags=question.tags)

    async def update_question(self, question_id: int, question: NewQuestion, account_id: int) -> Question | None:
        async with self._lock:
            cursor = self._write(
                "update_question",
                "UPDATE questions SET title = ?, content = ?, tags = ? WHERE id = ? AND account_id = ?",
                (question.title, question.content, _dump_tags(question.tags), question_id, account_id),
            )
        if cursor.rowcount == 0:
            return None
        return Question(id=question_id, title=question.title, content=question.content, tags=question.tags)

    async def delete_question(self, question_id: int, account_id: int) -> bool:
        async with self._lock:
            cursor = self._write(
                "delete_question",
                "DELETE FROM questions WHERE id = ? AND account_id = ?",
                (question_id, account_id),
            )
        return cursor.rowcount > 0

    async def is_question_owner(self, question_id: int, account_id: int) -> bool:
        row = self._query(
            "is_question_owner",
            "SELECT 1 FROM questions WHERE id = ? AND account_id = ?",
            (question_id, account_id),
        ).fetchone()
        return row is not None

    # -- answers --

    async def list_answers(self, question_id: int) -> list[Answer]:
        rows = self._query(
            "list_answers",
            "SELECT id, content, question_id FROM answers WHERE question_id = ? ORDER BY id",
            (question_id,),
        ).fetchall()
        return [Answer(id=row[0], content=row[1], question_id=row[2]) for row in rows]

    async def add_answer(self, answer: NewAnswer, account_id: int) -> Answer:
        """Insert an answer. A missing question surfaces as a foreign-key PersistenceError."""
        async with self._lock:
            cursor = self._write(
                "add_answer",
                "INSERT INTO answers (content, question_id, account_id) VALUES (?, ?, ?)",
                (answer.content, answer.question_id, account_id),
            )
        return Answer(id=cursor.lastrowid, content=answer.content, question_id=answer.question_id)

    async def update_answer(self, answer_id: int, content: str, account_id: int) -> Answer | None:
        async with self._lock:
            cursor = self._write(
                "update_answer",
                "UPDATE answers SET content = ? WHERE id = ? AND account_id = ?",
                (content, answer_id, account_id),
            )
            if cursor.rowcount == 0:
                return None
            row = self._query(
                "update_answer",
                "SELECT id, content, question_id FROM answers WHERE id = ?",
                (answer_id,),
            ).fetchone()
        return Answer(id=row[0], content=row[1], question_id=row[2])

    async def delete_answer(self, answer_id: int, account_id: int) -> bool:
        async with self._lock:
            cursor = self._write(
                "delete_answer",
                "DELETE FROM answers WHERE id = ? AND account_id = ?",
                (answer_id, account_id),
            )
        return cursor.rowcount > 0

    async def is_answer_owner(self, answer_id: int, account_id: int) -> bool:
        row = self._query(
            "is_answer_owner",
            "SELECT 1 FROM answers WHERE id = ? AND account_id = ?",
            (answer_id, account_id),
        ).fetchone()
        return row is not None

    # -- private helpers --

    def _query(self, operation: str, sql: str, params: tuple[Any, ...]) -> sqlite3.Cursor:
        try:
            return self._db.connection.execute(sql, params)
        except sqlite3.Error as exc:
            raise translate_error(exc, operation) from exc

    def _write(self, operation: str, sql: str, params: tuple[Any, ...]) -> sqlite3.Cursor:
        """Execute and commit a single statement, rolling back on failure."""
        try:
            cursor = self._db.connection.execute(sql, params)
            self._db.connection.commit()
        except sqlite3.Error as exc:
            self._db.connection.rollback()
            raise translate_error(exc, operation) from exc
        return cursor


def _dump_tags(tags: list[str] | None) -> str | None:
    return None if tags is None else json.dumps(tags)


def _question_from_row(row: tuple[Any, ...]) -> Question:
    tags = json.loads(row[3]) if row[3] is not None else None
    return Question(id=row[0], title=row[1], content=row[2], tags=tags)
