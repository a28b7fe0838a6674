"""Question endpoints: listing (public) and moderated add/update/delete (protected)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from starlette.responses import JSONResponse, PlainTextResponse, Response

from qna.views.ownership import require_question_owner
from qna.views.parsing import parse_json_body, parse_query
from qna.views.types import Pagination
from shared.auth.service import Unauthorized
from shared.dal.models import NewQuestion

if TYPE_CHECKING:
    from starlette.requests import Request

    from qna.auth.models import AuthenticatedAccount
    from shared.dal.content_repository import ContentRepository
    from shared.moderation.client import ModerationClient

logger = structlog.get_logger()


async def censor_question(moderation: ModerationClient, question: NewQuestion) -> NewQuestion:
    """Run title and content through the moderation provider, one after the other."""
    title = await moderation.censor(question.title)
    content = await moderation.censor(question.content)
    return question.model_copy(update={"title": title, "content": content})


async def get_questions(request: Request) -> Response:
    """GET /questions?limit=&offset= - list questions."""
    repo: ContentRepository = request.app.state.content_repo
    pagination = parse_query(request, Pagination)
    questions = await repo.list_questions(limit=pagination.limit, offset=pagination.offset)
    return JSONResponse([q.model_dump() for q in questions])


async def add_question(request: Request) -> Response:
    """POST /questions {title, content, tags?} - moderate and store a question."""
    repo: ContentRepository = request.app.state.content_repo
    moderation: ModerationClient = request.app.state.moderation_client
    account: AuthenticatedAccount = request.user

    new_question = await parse_json_body(request, NewQuestion)
    censored = await censor_question(moderation, new_question)
    question = await repo.add_question(censored, account.account_id)

    logger.info("question added", question_id=question.id, account_id=account.account_id)
    return JSONResponse(question.model_dump())


async def update_question(request: Request) -> Response:
    """PUT /questions/{question_id} {title, content, tags?} - owner-only moderated update."""
    repo: ContentRepository = request.app.state.content_repo
    moderation: ModerationClient = request.app.state.moderation_client
    account: AuthenticatedAccount = request.user
    question_id: int = request.path_params["question_id"]

    await require_question_owner(repo, question_id, account.account_id)
    new_question = await parse_json_body(request, NewQuestion)
    censored = await censor_question(moderation, new_question)

    question = await repo.update_question(question_id, censored, account.account_id)
    if question is None:
        raise Unauthorized(f"question {question_id}")
    return JSONResponse(question.model_dump())


async def delete_question(request: Request) -> Response:
    """DELETE /questions/{question_id} - owner-only delete (answers are removed with it)."""
    repo: ContentRepository = request.app.state.content_repo
    account: AuthenticatedAccount = request.user
    question_id: int = request.path_params["question_id"]

    await require_question_owner(repo, question_id, account.account_id)
    if not await repo.delete_question(question_id, account.account_id):
        raise Unauthorized(f"question {question_id}")

    logger.info("question deleted", question_id=question_id, account_id=account.account_id)
    return PlainTextResponse(f"Question {question_id} deleted")
