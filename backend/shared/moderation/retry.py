"""Bounded retry with exponential backoff for async calls.

The policy says how long to wait and how often to try; a classifier decides
which failures are worth another attempt. Anything the classifier rejects,
and the last failure once retries run out, propagates unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeVar

import anyio
import structlog

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

logger = structlog.get_logger()

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    max_retries: int = 3
    base_delay: float = 0.5
    multiplier: float = 2.0
    max_delay: float = 8.0

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if self.base_delay < 0 or self.max_delay < 0:
            raise ValueError("delays must be >= 0")
        if self.multiplier < 1:
            raise ValueError("multiplier must be >= 1")

    def delay_for(self, retry_number: int) -> float:
        """Seconds to wait before retry ``retry_number`` (0-based)."""
        return min(self.base_delay * self.multiplier**retry_number, self.max_delay)


async def retry_async(
    call: Callable[[], Awaitable[T]],
    *,
    policy: RetryPolicy,
    should_retry: Callable[[Exception], bool],
    sleep: Callable[[float], Awaitable[object]] = anyio.sleep,
    operation: str = "call",
) -> T:
    """Await ``call()`` until it succeeds, a failure is not retryable, or retries run out."""
    retry_number = 0
    while True:
        try:
            return await call()
        except Exception as exc:
            if not should_retry(exc):
                raise
            if retry_number >= policy.max_retries:
                logger.warning(
                    "retries exhausted",
                    operation=operation,
                    attempts=retry_number + 1,
                    error=str(exc),
                )
                raise
            delay = policy.delay_for(retry_number)
            retry_number += 1
            logger.info(
                "retrying after failure",
                operation=operation,
                retry=retry_number,
                max_retries=policy.max_retries,
                delay=delay,
                error=str(exc),
            )
            await sleep(delay)
