"""Route auth policy helpers for fail-closed authorization.

Each helper wraps a route endpoint and sets the ``AUTH_POLICY_ATTR`` marker
so that startup validation can verify every route has an explicit auth policy.
"""

from __future__ import annotations

import functools
from typing import TYPE_CHECKING

import structlog
from starlette.authentication import has_required_scope
from starlette.exceptions import HTTPException
from starlette.routing import Mount, Route

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from starlette.requests import Request
    from starlette.responses import Response
    from starlette.routing import BaseRoute

    Endpoint = Callable[[Request], Awaitable[Response]]

logger = structlog.get_logger()

AUTH_POLICY_ATTR = "__auth_policy__"
PROTECTED = "protected_api"
PUBLIC = "public"


def protected_api(endpoint: Endpoint) -> Endpoint:
    """Require an authenticated session; raise 401 without calling the endpoint otherwise."""

    @functools.wraps(endpoint)
    async def wrapper(request: Request) -> Response:
        if not has_required_scope(request, ["authenticated"]):
            logger.info("unauthenticated request rejected", path=request.url.path, method=request.method)
            raise HTTPException(status_code=401)
        return await endpoint(request)

    setattr(wrapper, AUTH_POLICY_ATTR, PROTECTED)
    return wrapper


def public_route(endpoint: Endpoint) -> Endpoint:
    """Mark endpoint as explicitly public (no auth required).

    Returns a thin wrapper so the marker lives on the wrapper, not on the
    original callable, and cannot leak to another route reusing the function.
    """

    @functools.wraps(endpoint)
    async def wrapper(request: Request) -> Response:
        return await endpoint(request)

    setattr(wrapper, AUTH_POLICY_ATTR, PUBLIC)
    return wrapper


def validate_route_auth_policy(routes: list[BaseRoute]) -> None:
    """Verify every Route has an auth policy marker. Mount routes are exempt.

    Raises RuntimeError listing all unclassified routes if any are found.
    """
    unclassified: list[str] = []
    for route in routes:
        if isinstance(route, Mount):
            continue
        if isinstance(route, Route) and not hasattr(route.endpoint, AUTH_POLICY_ATTR):
            name = route.name or getattr(route.endpoint, "__name__", "unknown")
            unclassified.append(f"{route.path} ({name})")

    if unclassified:
        details = ", ".join(unclassified)
        msg = f"Unclassified routes missing auth policy: {details}"
        raise RuntimeError(msg)
