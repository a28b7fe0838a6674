"""Abstract interface for question and answer persistence."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shared.dal.models import Answer, NewAnswer, NewQuestion, Question


class ContentRepository(ABC):
    """Abstract interface for question and answer persistence.

    Content passed in is already moderated. Every mutation of an existing row
    re-applies the ownership predicate inside the statement, so an update or
    delete that returns None/False means the row is gone or owned by someone else.
    """

    @abstractmethod
    async def list_questions(self, limit: int | None = None, offset: int = 0) -> list[Question]: ...

    @abstractmethod
    async def add_question(self, question: NewQuestion, account_id: int) -> Question: ...

    @abstractmethod
    async def update_question(self, question_id: int, question: NewQuestion, account_id: int) -> Question | None: ...

    @abstractmethod
    async def delete_question(self, question_id: int, account_id: int) -> bool: ...

    @abstractmethod
    async def is_question_owner(self, question_id: int, account_id: int) -> bool: ...

    @abstractmethod
    async def list_answers(self, question_id: int) -> list[Answer]: ...

    @abstractmethod
    async def add_answer(self, answer: NewAnswer, account_id: int) -> Answer: ...

    @abstractmethod
    async def update_answer(self, answer_id: int, content: str, account_id: int) -> Answer | None: ...

    @abstractmethod
    async def delete_answer(self, answer_id: int, account_id: int) -> bool: ...

    @abstractmethod
    async def is_answer_owner(self, answer_id: int, account_id: int) -> bool: ...
