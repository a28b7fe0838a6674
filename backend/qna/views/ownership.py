"""Fast-reject ownership checks run before any mutation of an existing resource.

The store applies the same predicate inside the mutating statement, so these
checks are not the only guard.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from shared.auth.service import Unauthorized

if TYPE_CHECKING:
    from shared.dal.content_repository import ContentRepository


async def require_question_owner(repo: ContentRepository, question_id: int, account_id: int) -> None:
    if not await repo.is_question_owner(question_id, account_id):
        raise Unauthorized(f"question {question_id}")


async def require_answer_owner(repo: ContentRepository, answer_id: int, account_id: int) -> None:
    if not await repo.is_answer_owner(answer_id, account_id):
        raise Unauthorized(f"answer {answer_id}")
