"""Bounded exponential-backoff retry for backend requests."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import TypeVar

from golf_scheduler.services.transient_errors import (
    TransientErrorClassifier,
    status_code_of,
)

T = TypeVar("T")

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryPolicy:
    """Backoff configuration for the request executor."""

    max_retries: int = 4
    base_delay_ms: int = 1500
    max_delay_ms: int = 15000
    backoff_multiplier: float = 2

    def delay_before(self, attempt_index: int) -> int:
        """Return the pause in milliseconds before the given attempt."""
        if attempt_index <= 0:
            return 0
        delay = self.base_delay_ms * self.backoff_multiplier ** (attempt_index - 1)
        return int(min(delay, self.max_delay_ms))


@dataclass(frozen=True)
class RequestAttempt:
    """One pass through the retry loop."""

    attempt_index: int
    delay_before_ms: int
    outcome: str


@dataclass
class ResilientRequestExecutor:
    """Run one logical request, retrying transient failures with backoff.

    Duplicate writes are possible when a response is lost after the backend
    applied it; mutations are upserts keyed by (session, user), so the
    executor does not deduplicate.
    """

    policy: RetryPolicy = field(default_factory=RetryPolicy)
    classifier: TransientErrorClassifier = field(
        default_factory=TransientErrorClassifier
    )
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep

    async def execute(
        self,
        operation: Callable[[], Awaitable[T]],
        *,
        action: str = "request",
        attempts: list[RequestAttempt] | None = None,
    ) -> T:
        """Await ``operation`` until it succeeds or fails permanently.

        Pass ``attempts`` to collect the trace of this call.
        """
        if attempts is None:
            attempts = []
        attempt = 0
        while True:
            delay_ms = self.policy.delay_before(attempt)
            if delay_ms:
                await self.sleep(delay_ms / 1000)
            try:
                result = await operation()
            except Exception as exc:
                status_code = status_code_of(exc)
                retryable = self.classifier.is_retryable(exc, status_code)
                exhausted = attempt >= self.policy.max_retries
                attempts.append(
                    RequestAttempt(
                        attempt_index=attempt,
                        delay_before_ms=delay_ms,
                        outcome="retry" if retryable and not exhausted else "fail",
                    )
                )
                _logger.warning(
                    "Backend %s failed (attempt %s/%s, status=%s): %s",
                    action,
                    attempt + 1,
                    self.policy.max_retries + 1,
                    status_code if status_code is not None else "n/a",
                    exc,
                )
                if not retryable or exhausted:
                    raise
                attempt += 1
                continue
            attempts.append(
                RequestAttempt(
                    attempt_index=attempt, delay_before_ms=delay_ms, outcome="ok"
                )
            )
            return result
