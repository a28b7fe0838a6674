"""Resilient client for the external content-moderation provider."""

from shared.moderation.client import ModerationClient
from shared.moderation.errors import (
    ModerationAPIError,
    ModerationClientError,
    ModerationError,
    ModerationSchemaError,
    ModerationServerError,
    ModerationTransportError,
)
from shared.moderation.retry import RetryPolicy, retry_async
from shared.moderation.settings import ModerationSettings

__all__ = [
    "ModerationAPIError",
    "ModerationClient",
    "ModerationClientError",
    "ModerationError",
    "ModerationSchemaError",
    "ModerationServerError",
    "ModerationSettings",
    "ModerationTransportError",
    "RetryPolicy",
    "retry_async",
]
