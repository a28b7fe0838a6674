"""ASGI middleware for the Q&A server."""

from __future__ import annotations

import time
import uuid
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = structlog.get_logger()

SECURITY_HEADERS: list[tuple[bytes, bytes]] = [
    (b"x-content-type-options", b"nosniff"),
    (b"x-frame-options", b"DENY"),
    (b"content-security-policy", b"default-src 'none'; frame-ancestors 'none'"),
]


class SecurityHeadersMiddleware:
    """Inject standard security headers into every HTTP response.

    The API serves no HTML, so the CSP denies everything.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def send_with_headers(message: Message) -> None:
            if message["type"] == "http.response.start":
                headers = list(message.get("headers", []))
                headers.extend(SECURITY_HEADERS)
                message["headers"] = headers
            await send(message)

        await self.app(scope, receive, send_with_headers)


class RequestContextMiddleware:
    """Bind a fresh request id, the method and the path into structlog contextvars.

    Every log line emitted while handling the request carries them. The
    response status and duration are logged once the response starts.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=uuid.uuid4().hex,
            method=scope["method"],
            path=scope["path"],
        )
        started = time.perf_counter()

        async def send_logging_status(message: Message) -> None:
            if message["type"] == "http.response.start":
                logger.info(
                    "request completed",
                    status=message["status"],
                    duration_ms=round((time.perf_counter() - started) * 1000, 2),
                )
            await send(message)

        try:
            await self.app(scope, receive, send_logging_status)
        finally:
            structlog.contextvars.clear_contextvars()


class SlashNormalizationMiddleware:
    """Strip trailing slashes so that /path/ is handled the same as /path.

    Starlette's ``redirect_slashes=True`` would answer the trailing-slash
    variant with a 307 that bypasses authentication, so the path is
    rewritten before routing instead.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http":
            path: str = scope["path"]
            if len(path) > 1 and path.endswith("/"):
                scope["path"] = path.rstrip("/")
        await self.app(scope, receive, send)
