"""Auth endpoints: registration and login."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from starlette.responses import JSONResponse, PlainTextResponse, Response

from qna.views.parsing import parse_json_body
from qna.views.types import Credentials
from shared.auth.password import HashingError

if TYPE_CHECKING:
    from starlette.requests import Request

    from shared.auth.service import AuthService

logger = structlog.get_logger()


async def registration(request: Request) -> Response:
    """POST /registration {email, password} - create an account.

    AccountAlreadyExists and PersistenceError are mapped to 422 by the app's exception handlers.
    """
    auth_service: AuthService = request.app.state.auth_service
    credentials = await parse_json_body(request, Credentials)

    try:
        await auth_service.register(credentials.email, credentials.password)
    except HashingError:
        logger.exception("cannot hash password during registration")
        return PlainTextResponse("Cannot create account", status_code=422)

    return PlainTextResponse("Account created", status_code=200)


async def login(request: Request) -> Response:
    """POST /login {email, password} - return an encrypted session token as a JSON string.

    WrongPassword (including unknown emails) is mapped to 401 by the app's exception handlers.
    """
    auth_service: AuthService = request.app.state.auth_service
    credentials = await parse_json_body(request, Credentials)

    try:
        token = await auth_service.login(credentials.email, credentials.password)
    except HashingError:
        logger.exception("cannot verify stored password hash")
        return PlainTextResponse("Internal Server Error", status_code=500)

    return JSONResponse(token)
