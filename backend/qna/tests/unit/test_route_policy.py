"""Tests for route auth policy helpers and validation."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from starlette.applications import Starlette
from starlette.authentication import AuthCredentials
from starlette.exceptions import HTTPException
from starlette.requests import Request
from starlette.responses import PlainTextResponse
from starlette.routing import Mount, Route

from qna.auth.policy import AUTH_POLICY_ATTR, PROTECTED, PUBLIC, protected_api, public_route, validate_route_auth_policy
from qna.server.app import create_app
from qna.server.settings import QnaServerSettings
from shared.auth.settings import AuthSettings
from shared.moderation.settings import ModerationSettings

if TYPE_CHECKING:
    from starlette.responses import Response


def _make_request(*, authenticated: bool) -> Request:
    scopes = ["authenticated"] if authenticated else []
    scope = {
        "type": "http",
        "method": "POST",
        "path": "/questions",
        "query_string": b"",
        "headers": [],
        "root_path": "",
        "server": ("testserver", 80),
        "scheme": "http",
        "auth": AuthCredentials(scopes),
    }
    return Request(scope)


class Probe:
    """Endpoint that records whether it was invoked."""

    def __init__(self) -> None:
        self.calls = 0

    async def __call__(self, _request: Request) -> Response:
        self.calls += 1
        return PlainTextResponse("ok")


class TestProtectedApi:
    async def test_authenticated_request_reaches_handler(self) -> None:
        probe = Probe()
        response = await protected_api(probe)(_make_request(authenticated=True))

        assert response.body == b"ok"
        assert probe.calls == 1

    async def test_unauthenticated_request_never_reaches_handler(self) -> None:
        probe = Probe()

        with pytest.raises(HTTPException) as exc_info:
            await protected_api(probe)(_make_request(authenticated=False))

        assert exc_info.value.status_code == 401
        assert probe.calls == 0

    def test_sets_marker(self) -> None:
        assert getattr(protected_api(Probe()), AUTH_POLICY_ATTR) == PROTECTED


class TestPublicRoute:
    async def test_passes_through(self) -> None:
        probe = Probe()
        await public_route(probe)(_make_request(authenticated=False))
        assert probe.calls == 1

    def test_marker_is_on_wrapper_only(self) -> None:
        async def endpoint(_request: Request) -> Response:
            return PlainTextResponse("ok")

        wrapped = public_route(endpoint)

        assert getattr(wrapped, AUTH_POLICY_ATTR) == PUBLIC
        assert not hasattr(endpoint, AUTH_POLICY_ATTR)


class TestValidateRouteAuthPolicy:
    async def _endpoint(self, _request: Request) -> Response:
        return PlainTextResponse("ok")

    def test_accepts_classified_routes(self) -> None:
        validate_route_auth_policy(
            [
                Route("/a", public_route(self._endpoint)),
                Route("/b", protected_api(self._endpoint)),
                Mount("/static", app=Starlette()),
            ],
        )

    def test_rejects_unclassified_routes(self) -> None:
        with pytest.raises(RuntimeError, match="/naked"):
            validate_route_auth_policy([Route("/naked", self._endpoint, name="naked")])

    def test_application_routes_are_all_classified(self, tmp_path) -> None:
        app = create_app(
            settings=QnaServerSettings(),
            auth_settings=AuthSettings(database_path=str(tmp_path / "test.db")),
            moderation_settings=ModerationSettings(),
        )
        routes = [r for r in app.routes if isinstance(r, Route)]

        assert routes
        for route in routes:
            assert hasattr(route.endpoint, AUTH_POLICY_ATTR), route.path
        app.state.db.close()

    def test_app_state_holds_only_what_handlers_use(self, tmp_path) -> None:
        app = create_app(
            settings=QnaServerSettings(),
            auth_settings=AuthSettings(database_path=str(tmp_path / "test.db")),
            moderation_settings=ModerationSettings(),
        )

        assert set(app.state._state) == {"db", "auth_service", "content_repo", "moderation_client"}
        app.state.db.close()
