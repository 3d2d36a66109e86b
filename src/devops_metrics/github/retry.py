"""Fixed-delay retry for remote calls.

Every GitHub call the sync engine makes (except repository resolution)
goes through ``execute_with_retry``: a failed attempt is logged and
retried after a constant pause until the attempt budget is spent, then
the last error propagates unchanged.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeVar

from devops_metrics.logging import get_logger

if TYPE_CHECKING:
    from devops_metrics.config import SyncConfig

logger = get_logger(__name__)

T = TypeVar("T")

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_DELAY_MS = 1000


async def execute_with_retry(
    operation: Callable[[], Awaitable[T]],
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    delay_ms: int = DEFAULT_DELAY_MS,
    *,
    description: str = "GitHub request",
) -> T:
    """Await ``operation()`` up to ``max_attempts`` times.

    Args:
        operation: Zero-argument factory producing a fresh awaitable per attempt
        max_attempts: Total attempts, including the first
        delay_ms: Fixed pause between attempts in milliseconds
        description: Label used in log lines

    Returns:
        The first successful result

    Raises:
        Exception: Whatever the final attempt raised
    """
    attempts = max(1, max_attempts)
    for attempt in range(1, attempts + 1):
        try:
            return await operation()
        except Exception as e:
            if attempt >= attempts:
                logger.error(
                    "{} failed after {} attempts: {}", description, attempts, e
                )
                raise
            logger.warning(
                "{} failed (attempt {}/{}), retrying in {}ms: {}",
                description,
                attempt,
                attempts,
                delay_ms,
                e,
            )
            await asyncio.sleep(delay_ms / 1000)

    raise AssertionError("unreachable")


@dataclass(frozen=True)
class RetryPolicy:
    """Attempt budget and fixed delay applied to remote calls."""

    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    delay_ms: int = DEFAULT_DELAY_MS

    @classmethod
    def from_config(cls, config: SyncConfig) -> RetryPolicy:
        return cls(max_attempts=config.retry_attempts, delay_ms=config.retry_delay_ms)

    async def execute(
        self,
        operation: Callable[[], Awaitable[T]],
        *,
        description: str = "GitHub request",
    ) -> T:
        return await execute_with_retry(
            operation,
            self.max_attempts,
            self.delay_ms,
            description=description,
        )
