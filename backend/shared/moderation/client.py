"""Client for the external bad-words moderation provider.

Every piece of user-submitted text passes through censor() before it is
stored. Masking decisions belong to the provider; this client only sends the
text, applies the retry policy, and classifies failures:

- transport failures (connect, DNS, timeouts) and 5xx responses are retried
  with exponential backoff, up to max_retries times;
- 4xx and other non-2xx responses (redirects are not followed) fail
  immediately with ModerationClientError;
- a 2xx body that cannot be decoded, or does not match the schema, fails
  with ModerationSchemaError;
- the whole call, retries included, is bounded by total_timeout.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import anyio
import httpx
import structlog
from pydantic import ValidationError

from shared.moderation.errors import (
    ModerationAPIError,
    ModerationClientError,
    ModerationSchemaError,
    ModerationServerError,
    ModerationTransportError,
)
from shared.moderation.models import BadWordsResponse
from shared.moderation.retry import RetryPolicy, retry_async

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from shared.moderation.settings import ModerationSettings

logger = structlog.get_logger()


def is_transient(exc: Exception) -> bool:
    """Network faults and provider-side 5xx responses are worth another attempt."""
    return isinstance(exc, (httpx.TransportError, ModerationServerError))


class ModerationClient:
    """Send text to the moderation provider and return its censored version."""

    def __init__(
        self,
        settings: ModerationSettings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Callable[[float], Awaitable[object]] = anyio.sleep,
    ) -> None:
        self._settings = settings
        self._transport = transport
        self._sleep = sleep
        self._policy = RetryPolicy(
            max_retries=settings.max_retries,
            base_delay=settings.base_delay,
            multiplier=settings.backoff_multiplier,
            max_delay=settings.max_delay,
        )

    async def censor(self, text: str) -> str:
        """Return ``text`` with profane spans masked by the provider.

        Raises a ModerationError subclass when moderation fails.
        """
        try:
            with anyio.fail_after(self._settings.total_timeout):
                async with httpx.AsyncClient(
                    timeout=self._settings.request_timeout,
                    follow_redirects=False,
                    transport=self._transport,
                ) as client:
                    response = await retry_async(
                        lambda: self._send(client, text),
                        policy=self._policy,
                        should_retry=is_transient,
                        sleep=self._sleep,
                        operation="moderation",
                    )
        except httpx.TransportError as e:
            logger.error("moderation provider unreachable", error=str(e))
            raise ModerationTransportError("Moderation provider unreachable") from e
        except TimeoutError as e:
            logger.error("moderation call timed out", timeout=self._settings.total_timeout)
            raise ModerationTransportError("Moderation provider timed out") from e
        except ModerationAPIError as e:
            logger.error("moderation provider error", status=e.status, provider_message=e.message)
            raise
        except httpx.DecodingError as e:
            logger.error("moderation response body could not be decoded", error=str(e))
            raise ModerationSchemaError("Unexpected moderation response") from e
        except httpx.HTTPError as e:
            logger.error("moderation request failed", error_type=type(e).__name__, error=str(e))
            raise ModerationTransportError("Moderation request failed") from e

        return self._parse(response)

    async def _send(self, client: httpx.AsyncClient, text: str) -> httpx.Response:
        """Make one request; raise for any non-success status.

        Only 5xx is worth retrying. Any other non-2xx status, redirects
        included, means the request itself was rejected.
        """
        response = await client.post(
            self._settings.base_url,
            params={"censor_character": self._settings.censor_character},
            headers={"apikey": self._settings.api_key},
            content=text.encode("utf-8"),
        )
        if response.is_success:
            return response
        if response.is_server_error:
            raise ModerationServerError(response.status_code, _error_message(response))
        raise ModerationClientError(response.status_code, _error_message(response))

    @staticmethod
    def _parse(response: httpx.Response) -> str:
        try:
            body = BadWordsResponse.model_validate_json(response.content)
        except ValidationError as e:
            logger.error("moderation response did not match schema", status=response.status_code)
            raise ModerationSchemaError("Unexpected moderation response") from e
        return body.censored_content


def _error_message(response: httpx.Response) -> str:
    """Read the provider's ``message`` field, falling back to the raw body."""
    try:
        data = response.json()
    except ValueError:
        return response.text
    if isinstance(data, dict) and isinstance(data.get("message"), str):
        return data["message"]
    return response.text
