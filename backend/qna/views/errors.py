"""Map domain failures to HTTP responses.

Clients get a short generic message per failure class. Detail (database
codes, provider status and message) goes to the log only.
"""

from __future__ import annotations

from http import HTTPStatus
from typing import TYPE_CHECKING, cast

import structlog
from starlette.exceptions import HTTPException
from starlette.responses import JSONResponse, PlainTextResponse, Response

from qna.auth.policy import AUTH_POLICY_ATTR, PROTECTED
from qna.views.parsing import RequestValidationError
from shared.auth.password import HashingError
from shared.auth.service import AccountAlreadyExists, Unauthorized, WrongPassword
from shared.dal.errors import PersistenceError
from shared.moderation.errors import ModerationError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Mapping

    from starlette.requests import Request

    ExceptionHandler = Callable[[Request, Exception], Awaitable[Response]]

logger = structlog.get_logger()


def _account_id(request: Request) -> int | None:
    user = request.user if "user" in request.scope else None
    return getattr(user, "account_id", None)


async def _unauthorized(request: Request, exc: Exception) -> Response:
    logger.warning("account does not own resource", resource=str(exc), account_id=_account_id(request))
    return PlainTextResponse("Unauthorized to change the resource", status_code=HTTPStatus.UNAUTHORIZED)


async def _wrong_password(request: Request, _exc: Exception) -> Response:
    logger.warning("login rejected", path=request.url.path)
    return PlainTextResponse("Wrong E-mail/Password combination", status_code=HTTPStatus.UNAUTHORIZED)


async def _account_exists(request: Request, _exc: Exception) -> Response:
    logger.warning("registration rejected, account exists", path=request.url.path)
    return PlainTextResponse("Account already exists", status_code=HTTPStatus.UNPROCESSABLE_ENTITY)


async def _persistence_error(request: Request, exc: Exception) -> Response:
    error = cast("PersistenceError", exc)
    logger.error("store operation failed", path=request.url.path, code=error.code, detail=str(error))
    return PlainTextResponse("Cannot update data", status_code=HTTPStatus.UNPROCESSABLE_ENTITY)


async def _hashing_error(request: Request, exc: Exception) -> Response:
    logger.error("password hashing failed", path=request.url.path, error=str(exc))
    return PlainTextResponse("Internal Server Error", status_code=HTTPStatus.INTERNAL_SERVER_ERROR)


async def _moderation_error(request: Request, exc: Exception) -> Response:
    logger.error("content moderation failed", path=request.url.path, error_type=type(exc).__name__, error=str(exc))
    return PlainTextResponse("Internal Server Error", status_code=HTTPStatus.INTERNAL_SERVER_ERROR)


async def _request_validation_error(request: Request, exc: Exception) -> Response:
    error = cast("RequestValidationError", exc)
    logger.info("malformed request", path=request.url.path, error=error.message)
    return JSONResponse({"error": error.message}, status_code=error.status_code)


async def _http_exception(request: Request, exc: Exception) -> Response:
    """Rewrite 401s raised by protected endpoints to JSON responses.

    All other HTTP exceptions keep Starlette's plain-text behavior.
    """
    http_exc = cast("HTTPException", exc)
    endpoint = request.scope.get("endpoint")
    if http_exc.status_code == HTTPStatus.UNAUTHORIZED and getattr(endpoint, AUTH_POLICY_ATTR, None) == PROTECTED:
        return JSONResponse({"error": "Authentication required"}, status_code=HTTPStatus.UNAUTHORIZED)
    if http_exc.status_code in {HTTPStatus.NO_CONTENT, HTTPStatus.NOT_MODIFIED}:
        return Response(status_code=http_exc.status_code, headers=http_exc.headers)
    return PlainTextResponse(http_exc.detail or "", status_code=http_exc.status_code, headers=http_exc.headers)


EXCEPTION_HANDLERS: Mapping[type[Exception], ExceptionHandler] = {
    HTTPException: _http_exception,
    Unauthorized: _unauthorized,
    WrongPassword: _wrong_password,
    AccountAlreadyExists: _account_exists,
    PersistenceError: _persistence_error,
    HashingError: _hashing_error,
    ModerationError: _moderation_error,
    RequestValidationError: _request_validation_error,
}
