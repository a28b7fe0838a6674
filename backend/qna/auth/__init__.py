"""Request authorization: Starlette token backend, account model, and route policy."""

from qna.auth.backend import TokenAuthBackend
from qna.auth.models import AuthenticatedAccount
from qna.auth.policy import protected_api, public_route, validate_route_auth_policy

__all__ = [
    "AuthenticatedAccount",
    "TokenAuthBackend",
    "protected_api",
    "public_route",
    "validate_route_auth_policy",
]
