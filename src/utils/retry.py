"""Retry execution with structured logging using tenacity."""

from __future__ import annotations

import asyncio
import random
from typing import TYPE_CHECKING, Any, TypeVar

from tenacity import AsyncRetrying, RetryCallState, stop_after_attempt

from src.core.errors import RetryBudgetExhaustedError
from src.core.retry_classification import compute_backoff_delay, is_retryable_error
from src.utils.logger import get_logger

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from src.models.retry_policy import RetryPolicy

T = TypeVar("T")

default_logger = get_logger(__name__)


class RetryExecutor:
    """Runs an async operation under a ``RetryPolicy``.

    Attempt flow: a success returns immediately. A failure on the last
    allowed attempt raises ``RetryBudgetExhaustedError``. A non-retryable
    failure is re-raised unchanged. Anything else sleeps for
    ``compute_delay(attempt_index)`` and tries again.
    """

    def __init__(
        self,
        policy: RetryPolicy,
        logger: Any = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        rng: Callable[[], float] = random.random,
    ) -> None:
        self.policy = policy
        self.logger = logger if logger is not None else default_logger
        self._sleep = sleep
        self._rng = rng

    def should_retry(self, error: BaseException) -> bool:
        return is_retryable_error(error)

    def compute_delay(self, attempt_index: int) -> float:
        """Delay in milliseconds before retry ``attempt_index`` (zero-based)."""
        return compute_backoff_delay(self.policy, attempt_index, self._rng)

    async def execute_with_retry(
        self,
        operation: Callable[[], Awaitable[T]],
        context: str = "",
    ) -> T:
        """Run ``operation`` until it succeeds, fails fatally or runs out of retries."""

        def _should_attempt_again(retry_state: RetryCallState) -> bool:
            outcome = retry_state.outcome
            if outcome is None or not outcome.failed:
                return False
            error = outcome.exception()
            if isinstance(error, asyncio.CancelledError):
                return False
            # Budget exhaustion takes precedence over classification.
            if retry_state.attempt_number >= self.policy.max_attempts:
                return True
            return self.should_retry(error)

        def _wait_seconds(retry_state: RetryCallState) -> float:
            return self.compute_delay(retry_state.attempt_number - 1) / 1000.0

        def _log_retry(retry_state: RetryCallState) -> None:
            delay_seconds = retry_state.next_action.sleep if retry_state.next_action else 0.0
            self.logger.warning(
                "retrying_operation",
                context=context,
                attempt=retry_state.attempt_number,
                max_attempts=self.policy.max_attempts,
                delay_ms=round(delay_seconds * 1000.0, 1),
                error=_describe(retry_state),
            )

        def _raise_exhausted(retry_state: RetryCallState) -> None:
            last_error = retry_state.outcome.exception() if retry_state.outcome else None
            if last_error is None:
                last_error = RuntimeError("unknown error")
            exhausted = RetryBudgetExhaustedError(self.policy.max_retries, last_error)
            self.logger.error(
                "retry_budget_exhausted",
                context=context,
                attempts=retry_state.attempt_number,
                error=str(exhausted),
            )
            raise exhausted from last_error

        # tenacity only awaits coroutine functions, not lambdas returning awaitables.
        async def _attempt() -> T:
            return await operation()

        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.policy.max_attempts),
            wait=_wait_seconds,
            retry=_should_attempt_again,
            before_sleep=_log_retry,
            retry_error_callback=_raise_exhausted,
            sleep=self._sleep,
        )

        try:
            return await retrying(_attempt)
        except RetryBudgetExhaustedError:
            raise
        except Exception as exc:
            self.logger.error("non_retryable_error", context=context, error=str(exc))
            raise


def _describe(retry_state: RetryCallState) -> str:
    if retry_state.outcome is None:
        return "unknown"
    return str(retry_state.outcome.exception())
