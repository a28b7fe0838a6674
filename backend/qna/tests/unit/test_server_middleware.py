"""Tests for Q&A server middleware."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import structlog
from starlette.applications import Starlette
from starlette.responses import JSONResponse
from starlette.routing import Route
from starlette.testclient import TestClient

from qna.server.middleware import (
    SECURITY_HEADERS,
    RequestContextMiddleware,
    SecurityHeadersMiddleware,
    SlashNormalizationMiddleware,
)

if TYPE_CHECKING:
    from starlette.requests import Request


async def _echo_path(request: Request) -> JSONResponse:
    return JSONResponse({"path": request.url.path})


async def _echo_log_context(_request: Request) -> JSONResponse:
    return JSONResponse(structlog.contextvars.get_contextvars())


def _make_app(middleware: type) -> Starlette:
    app = Starlette(
        routes=[
            Route("/items", _echo_path, methods=["GET"]),
            Route("/context", _echo_log_context, methods=["GET"]),
        ],
    )
    app.add_middleware(middleware)
    return app


class TestSlashNormalization:
    def test_trailing_slash_is_stripped(self):
        client = TestClient(_make_app(SlashNormalizationMiddleware))
        response = client.get("/items/", follow_redirects=False)

        assert response.status_code == 200
        assert response.json() == {"path": "/items"}

    def test_root_path_unchanged(self):
        client = TestClient(_make_app(SlashNormalizationMiddleware))
        assert client.get("/").status_code == 404


class TestSecurityHeaders:
    def test_headers_added_to_every_response(self):
        client = TestClient(_make_app(SecurityHeadersMiddleware))

        for path in ("/items", "/missing"):
            response = client.get(path)
            for name, value in SECURITY_HEADERS:
                assert response.headers[name.decode()] == value.decode()

    def test_nosniff_and_deny(self):
        response = TestClient(_make_app(SecurityHeadersMiddleware)).get("/items")

        assert response.headers["x-content-type-options"] == "nosniff"
        assert response.headers["x-frame-options"] == "DENY"


class TestRequestContext:
    def test_binds_request_metadata(self):
        client = TestClient(_make_app(RequestContextMiddleware))

        context = client.get("/context").json()

        assert context["method"] == "GET"
        assert context["path"] == "/context"
        assert len(context["request_id"]) == 32

    def test_fresh_request_id_per_request(self):
        client = TestClient(_make_app(RequestContextMiddleware))

        first = client.get("/context").json()["request_id"]
        second = client.get("/context").json()["request_id"]

        assert first != second

    def test_context_cleared_after_request(self):
        client = TestClient(_make_app(RequestContextMiddleware))
        client.get("/context")

        assert "request_id" not in structlog.contextvars.get_contextvars()

    def test_logs_completion(self, caplog):
        caplog.set_level(logging.INFO)
        client = TestClient(_make_app(RequestContextMiddleware))
        client.get("/items")

        assert "request completed" in caplog.text
