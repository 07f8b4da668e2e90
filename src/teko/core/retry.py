"""Retry-with-backoff wrapper for fallible async operations."""

import asyncio
import random
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Protocol, TypeVar

import structlog

from teko.errors import FatalError, RetryExhaustedError
from teko.observability.logging import get_logger
from teko.observability.metrics import RETRY_ATTEMPTS

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)


class Attempt(Protocol[T_co]):
    """A zero-argument operation that can be attempted repeatedly."""

    def __call__(self) -> Awaitable[T_co]: ...


@dataclass
class RetryContext:
    """State of a single retried call."""

    label: str
    max_attempts: int
    backoff_range: tuple[int, int]
    attempt: int = 0

    @property
    def is_last_attempt(self) -> bool:
        return self.attempt >= self.max_attempts


class RetryPolicy:
    """Runs an operation up to a fixed number of times with random pauses.

    Parameters
    ----------
    logger : structlog.stdlib.BoundLogger | None
        Logger for attempt warnings and exhaustion errors.
    sleep : Callable[[float], Awaitable[None]]
        Coroutine used to pause between attempts.
    rng : random.Random | None
        Source of randomness for the backoff duration.
    """

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        rng: random.Random | None = None,
    ):
        self._logger = logger or get_logger(__name__)
        self._sleep = sleep
        self._rng = rng or random.Random()

    async def execute(
        self,
        operation: Attempt[T],
        max_attempts: int = 3,
        backoff_range: tuple[int, int] = (5, 10),
        label: str = "",
    ) -> T:
        """Run ``operation`` until it succeeds or attempts run out.

        Parameters
        ----------
        operation : Attempt[T]
            Operation to run. It is invoked afresh on every attempt, so any
            attempt-specific data must be built inside it.
        max_attempts : int
            Total number of attempts, including the first.
        backoff_range : tuple[int, int]
            Inclusive range of whole seconds to pause after a failed attempt.
        label : str
            Identity label included in every log line.

        Returns
        -------
        T
            Result of the first successful attempt.

        Raises
        ------
        RetryExhaustedError
            If every attempt fails. Chained from the last failure.
        FatalError
            Propagated immediately, without retrying.
        """
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")
        low, high = backoff_range
        if low < 0 or low > high:
            raise ValueError(f"Invalid backoff range: {backoff_range}")

        context = RetryContext(label=label, max_attempts=max_attempts, backoff_range=(low, high))
        while True:
            context.attempt += 1
            try:
                return await operation()
            except FatalError:
                raise
            except Exception as e:
                if context.is_last_attempt:
                    RETRY_ATTEMPTS.labels(outcome="exhausted").inc()
                    self._logger.error(
                        f"{label} | Max attempts reached: {e}",
                        label=label,
                        attempts=context.attempt,
                        error=str(e),
                    )
                    raise RetryExhaustedError(label, context.attempt, e) from e

                pause = self._rng.randint(low, high)
                RETRY_ATTEMPTS.labels(outcome="retried").inc()
                self._logger.warning(
                    f"{label} | Attempt {context.attempt} failed: {e}. Retrying in {pause}s...",
                    label=label,
                    attempt=context.attempt,
                    max_attempts=max_attempts,
                    error=str(e),
                    pause_seconds=pause,
                )
                await self._sleep(pause)
