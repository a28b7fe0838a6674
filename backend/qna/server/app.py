from __future__ import annotations

import contextlib
from typing import TYPE_CHECKING

import anyio
import structlog
from starlette.applications import Starlette
from starlette.middleware.authentication import AuthenticationMiddleware
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse
from starlette.routing import Route

from qna.auth import TokenAuthBackend, protected_api, public_route, validate_route_auth_policy
from qna.server.middleware import RequestContextMiddleware, SecurityHeadersMiddleware, SlashNormalizationMiddleware
from qna.server.settings import QnaServerSettings
from qna.views import (
    EXCEPTION_HANDLERS,
    add_answer,
    add_question,
    delete_answer,
    delete_question,
    get_answers,
    get_questions,
    login,
    registration,
    update_answer,
    update_question,
)
from shared.auth import AuthService, AuthSettings, TokenCodec, get_hasher
from shared.db import Database, SqliteAccountRepository, SqliteContentRepository
from shared.logging import setup_logging
from shared.moderation import ModerationClient, ModerationSettings

logger = structlog.get_logger()

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Awaitable, Callable

    import httpx
    from starlette.requests import Request


async def health(_request: Request) -> JSONResponse:
    return JSONResponse({"status": "ok"})


def create_app(
    settings: QnaServerSettings | None = None,
    auth_settings: AuthSettings | None = None,  # required in production (via get_app)
    moderation_settings: ModerationSettings | None = None,  # required in production (via get_app)
    *,
    moderation_transport: httpx.AsyncBaseTransport | None = None,
    moderation_sleep: Callable[[float], Awaitable[object]] = anyio.sleep,
) -> Starlette:
    if settings is None:  # pragma: no cover
        settings = QnaServerSettings()
    if auth_settings is None:  # pragma: no cover
        auth_settings = AuthSettings()  # type: ignore[call-arg]
    if moderation_settings is None:  # pragma: no cover
        moderation_settings = ModerationSettings()  # type: ignore[call-arg]

    routes = [
        # Public routes
        Route("/health", public_route(health), methods=["GET"], name="health"),
        Route("/registration", public_route(registration), methods=["POST"], name="registration"),
        Route("/login", public_route(login), methods=["POST"], name="login"),
        Route("/questions", public_route(get_questions), methods=["GET"], name="get_questions"),
        Route(
            "/questions/{question_id:int}/answers",
            public_route(get_answers),
            methods=["GET"],
            name="get_answers",
        ),
        # Protected JSON routes (return 401 JSON when unauthenticated)
        Route("/questions", protected_api(add_question), methods=["POST"], name="add_question"),
        Route(
            "/questions/{question_id:int}",
            protected_api(update_question),
            methods=["PUT"],
            name="update_question",
        ),
        Route(
            "/questions/{question_id:int}",
            protected_api(delete_question),
            methods=["DELETE"],
            name="delete_question",
        ),
        Route("/answers", protected_api(add_answer), methods=["POST"], name="add_answer"),
        Route("/answers/{answer_id:int}", protected_api(update_answer), methods=["PUT"], name="update_answer"),
        Route("/answers/{answer_id:int}", protected_api(delete_answer), methods=["DELETE"], name="delete_answer"),
    ]

    validate_route_auth_policy(routes)

    db = Database(auth_settings.database_path)
    db.connect()
    account_repo = SqliteAccountRepository(db)
    content_repo = SqliteContentRepository(db)
    token_codec = TokenCodec(auth_settings.token_key, validity_seconds=auth_settings.token_validity_seconds)
    hasher = get_hasher(auth_settings.password_hasher)
    auth_service = AuthService(account_repo, token_codec, password_hasher=hasher)
    moderation_client = ModerationClient(moderation_settings, transport=moderation_transport, sleep=moderation_sleep)

    @contextlib.asynccontextmanager
    async def lifespan(_app: Starlette) -> AsyncGenerator[None]:  # pragma: no cover
        yield
        db.close()

    app = Starlette(routes=routes, lifespan=lifespan, exception_handlers=dict(EXCEPTION_HANDLERS))
    app.add_middleware(SlashNormalizationMiddleware)  # type: ignore[arg-type]
    app.add_middleware(AuthenticationMiddleware, backend=TokenAuthBackend(auth_service))  # type: ignore[arg-type]
    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type", "Authorization"],
    )
    app.add_middleware(SecurityHeadersMiddleware)  # type: ignore[arg-type]
    app.add_middleware(RequestContextMiddleware)  # type: ignore[arg-type]

    app.state.db = db
    app.state.auth_service = auth_service
    app.state.content_repo = content_repo
    app.state.moderation_client = moderation_client

    logger.info("qna server ready", database_path=auth_settings.database_path)
    return app


def get_app() -> Starlette:  # pragma: no cover
    """Factory function for uvicorn --factory qna.server.app:get_app."""
    s = QnaServerSettings()
    auth = AuthSettings()  # type: ignore[call-arg]
    moderation = ModerationSettings()  # type: ignore[call-arg]
    setup_logging(log_dir=s.log_dir)
    return create_app(settings=s, auth_settings=auth, moderation_settings=moderation)
