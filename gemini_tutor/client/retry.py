"""Bounded, classified retry for asynchronous endpoint calls.

``run_with_retry`` wraps a zero-argument coroutine function and retries it on
rate-limit and transient server failures with exponential backoff:

- non-retryable failures are re-raised immediately, with no delay;
- rate-limited failures wait the full current delay;
- server-internal failures wait half of the current delay;
- after each wait the delay grows by ``growth_factor``.

Each invocation owns a fresh ``RetryAttemptState``; policies are immutable
values passed per call, so concurrent calls share nothing.
"""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
import logging
from typing import TypeVar

from ..constants import (
    DEFAULT_GROWTH_FACTOR,
    DEFAULT_INITIAL_DELAY_MS,
    DEFAULT_MAX_RETRIES,
)
from ..exceptions import ErrorKind
from .error_handler import ClassifiedError, classify_error

log = logging.getLogger(__name__)

T = TypeVar("T")

Sleep = Callable[[float], Awaitable[object]]
Classifier = Callable[[BaseException], ClassifiedError]


@dataclass(frozen=True)
class RetryPolicy:
    """Immutable retry configuration for a single call"""

    max_retries: int = DEFAULT_MAX_RETRIES
    initial_delay_ms: float = DEFAULT_INITIAL_DELAY_MS
    growth_factor: float = DEFAULT_GROWTH_FACTOR

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if self.initial_delay_ms < 0:
            raise ValueError("initial_delay_ms must be >= 0")
        if self.growth_factor < 1:
            raise ValueError("growth_factor must be >= 1")

    @property
    def max_attempts(self) -> int:
        """Worst-case number of calls to the operation"""
        return self.max_retries + 1

    def new_state(self) -> "RetryAttemptState":
        return RetryAttemptState(
            attempts_remaining=self.max_retries,
            current_delay_ms=self.initial_delay_ms,
        )


@dataclass
class RetryAttemptState:
    """Per-invocation retry bookkeeping, discarded when the call settles"""

    attempts_remaining: int
    current_delay_ms: float

    def delay_for(self, kind: ErrorKind) -> float:
        """Milliseconds to wait before retrying a failure of ``kind``"""
        if kind is ErrorKind.SERVER_INTERNAL:
            return self.current_delay_ms / 2
        return self.current_delay_ms

    def advance(self, growth_factor: float) -> None:
        self.current_delay_ms *= growth_factor
        self.attempts_remaining -= 1


async def run_with_retry(
    operation: Callable[[], Awaitable[T]],
    policy: RetryPolicy | None = None,
    *,
    sleep: Sleep | None = None,
    classifier: Classifier = classify_error,
) -> T:
    """Run ``operation`` until it succeeds, fails permanently, or runs out.

    Args:
        operation: Zero-argument callable returning an awaitable.
        policy: Retry configuration; ``RetryPolicy()`` when omitted.
        sleep: Coroutine function taking seconds; ``asyncio.sleep`` when
            omitted. Tests inject a recorder to skip real waiting.
        classifier: Maps a caught exception to a ``ClassifiedError``.

    Returns:
        The operation's result.

    Raises:
        Exception: The first non-retryable error, or the last retryable
            error once retries are exhausted, unchanged.
    """
    policy = policy or RetryPolicy()
    sleep = sleep or asyncio.sleep
    state = policy.new_state()

    while True:
        try:
            return await operation()
        except Exception as error:
            classified = classifier(error)
            if not classified.is_retryable:
                log.debug("Non-retryable failure, not retrying: %s", error)
                raise

            if state.attempts_remaining <= 0:
                log.error(
                    "Endpoint call failed after %d retries.",
                    policy.max_retries,
                    exc_info=True,
                )
                raise

            delay_ms = state.delay_for(classified.kind)
            log.warning(
                "%s failure (%s). Retrying in %.0f ms (%d retries left).",
                classified.kind.value,
                error,
                delay_ms,
                state.attempts_remaining,
            )
            await sleep(delay_ms / 1000)
            state.advance(policy.growth_factor)
