"""Answer endpoints. Answers are submitted as form data."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from starlette.responses import JSONResponse, PlainTextResponse, Response

from qna.views.ownership import require_answer_owner
from qna.views.parsing import parse_form_body
from shared.auth.service import Unauthorized
from shared.dal.models import AnswerUpdate, NewAnswer

if TYPE_CHECKING:
    from starlette.requests import Request

    from qna.auth.models import AuthenticatedAccount
    from shared.dal.content_repository import ContentRepository
    from shared.moderation.client import ModerationClient

logger = structlog.get_logger()


async def get_answers(request: Request) -> Response:
    """GET /questions/{question_id}/answers - list answers to a question."""
    repo: ContentRepository = request.app.state.content_repo
    answers = await repo.list_answers(request.path_params["question_id"])
    return JSONResponse([a.model_dump() for a in answers])


async def add_answer(request: Request) -> Response:
    """POST /answers (form: content, question_id) - moderate and store an answer."""
    repo: ContentRepository = request.app.state.content_repo
    moderation: ModerationClient = request.app.state.moderation_client
    account: AuthenticatedAccount = request.user

    new_answer = await parse_form_body(request, NewAnswer)
    content = await moderation.censor(new_answer.content)
    answer = await repo.add_answer(new_answer.model_copy(update={"content": content}), account.account_id)

    logger.info("answer added", answer_id=answer.id, question_id=answer.question_id, account_id=account.account_id)
    return JSONResponse(answer.model_dump())


async def update_answer(request: Request) -> Response:
    """PUT /answers/{answer_id} (form: content) - owner-only moderated update."""
    repo: ContentRepository = request.app.state.content_repo
    moderation: ModerationClient = request.app.state.moderation_client
    account: AuthenticatedAccount = request.user
    answer_id: int = request.path_params["answer_id"]

    await require_answer_owner(repo, answer_id, account.account_id)
    update = await parse_form_body(request, AnswerUpdate)
    content = await moderation.censor(update.content)

    answer = await repo.update_answer(answer_id, content, account.account_id)
    if answer is None:
        raise Unauthorized(f"answer {answer_id}")
    return JSONResponse(answer.model_dump())


async def delete_answer(request: Request) -> Response:
    """DELETE /answers/{answer_id} - owner-only delete."""
    repo: ContentRepository = request.app.state.content_repo
    account: AuthenticatedAccount = request.user
    answer_id: int = request.path_params["answer_id"]

    await require_answer_owner(repo, answer_id, account.account_id)
    if not await repo.delete_answer(answer_id, account.account_id):
        raise Unauthorized(f"answer {answer_id}")
    return PlainTextResponse(f"Answer {answer_id} deleted")
