"""
Caller-side conflict retry policy.

One call moves through:

    start -> attempt -> SUCCESS
                     -> NON_RETRIABLE
                     -> (conflict) backoff -> attempt ...
                     -> (conflict, bound reached) EXHAUSTED

Each attempt re-invokes the whole read-modify-conditional-write operation, so
every retry starts from a fresh read and a fresh version token. Exhaustion is
a hard failure: there is deliberately no unconditional-write fallback.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable

from errors import DocumentError, RetriesExhausted, VersionConflict
from settings import Settings

logger = logging.getLogger(__name__)

DEFAULT_MAX_RETRIES = 3
DEFAULT_BASE_DELAY = 0.1

SleepFunc = Callable[[float], Awaitable[Any]]
OperationCall = Callable[[], Awaitable[Any]]


class RetryState(str, Enum):
    """Terminal states of one retried call."""

    SUCCESS = "success"
    NON_RETRIABLE = "non_retriable"
    EXHAUSTED = "exhausted"


@dataclass(frozen=True)
class RetryOutcome:
    state: RetryState
    attempts: int
    document: Any = None
    error: DocumentError | None = None

    @property
    def ok(self) -> bool:
        return self.state is RetryState.SUCCESS


class ConflictRetryClient:
    """
    Holds only its policy (bound, base delay, sleep function). No document,
    version or lock survives between calls.
    """

    def __init__(
        self,
        *,
        max_retries: int = DEFAULT_MAX_RETRIES,
        base_delay: float = DEFAULT_BASE_DELAY,
        sleep: SleepFunc = asyncio.sleep,
    ) -> None:
        if max_retries < 1:
            raise ValueError("max_retries must be at least 1")
        self.max_retries = max_retries
        self.base_delay = base_delay
        self._sleep = sleep

    @classmethod
    def from_settings(cls, settings: Settings, *, sleep: SleepFunc = asyncio.sleep) -> "ConflictRetryClient":
        return cls(max_retries=settings.client_max_retries, base_delay=settings.client_base_delay, sleep=sleep)

    def backoff_delay(self, attempt: int) -> float:
        # linear: attempt 1 waits one unit, attempt 2 two units, ...
        return self.base_delay * attempt

    async def run(self, call: OperationCall, max_retries: int | None = None) -> RetryOutcome:
        limit = self.max_retries if max_retries is None else max_retries
        if limit < 1:
            raise ValueError("max_retries must be at least 1")

        attempts = 0
        while True:
            attempts += 1
            try:
                document = await call()
            except VersionConflict as e:
                if attempts >= limit:
                    logger.warning("RETRY: giving up after %d conflicting attempts", attempts)
                    return RetryOutcome(RetryState.EXHAUSTED, attempts, error=e)
                delay = self.backoff_delay(attempts)
                logger.info("RETRY: conflict on attempt %d/%d, retrying in %.3fs", attempts, limit, delay)
                await self._sleep(delay)
            except DocumentError as e:
                return RetryOutcome(RetryState.NON_RETRIABLE, attempts, error=e)
            else:
                return RetryOutcome(RetryState.SUCCESS, attempts, document=document)

    async def perform(self, call: OperationCall, max_retries: int | None = None) -> Any:
        """Return the post-mutation document, or raise the typed failure."""
        outcome = await self.run(call, max_retries)
        if outcome.ok:
            return outcome.document
        if outcome.state is RetryState.EXHAUSTED:
            raise RetriesExhausted(outcome.attempts) from outcome.error
        if outcome.state is RetryState.NON_RETRIABLE and outcome.error is not None:
            raise outcome.error
        raise RuntimeError(f"Unexpected retry outcome {outcome.state}")
