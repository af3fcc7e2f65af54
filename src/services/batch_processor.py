"""Bounded-concurrency batch processor with per-item retry and timeout."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

import structlog

from src.core.errors import OperationTimeoutError
from src.models.batch_result import BatchResult, BatchStats
from src.models.operation_outcome import OperationOutcome
from src.models.progress_event import ProgressEvent
from src.utils.retry import RetryExecutor

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Sequence

    from src.models.batch_config import BatchConfig
    from src.services.protocols import OperationFn, ProgressSink

default_logger = structlog.get_logger(__name__)


def chunked(ids: Sequence[str], size: int) -> list[list[str]]:
    """Split ``ids`` into consecutive groups of ``size`` (the last may be shorter)."""
    return [list(ids[i : i + size]) for i in range(0, len(ids), size)]


class BatchProcessor:
    """Drives identifiers through an async operation one group at a time.

    Each group of ``max_concurrent`` identifiers runs concurrently and the
    whole group settles before the next one starts. Item failures are
    captured as outcomes and never raised out of ``run``.

    Counters live in a ``BatchStats`` created per ``run`` call, so one
    processor can serve several runs, even concurrently.
    """

    def __init__(
        self,
        config: BatchConfig,
        progress_sink: ProgressSink | None = None,
        logger: Any = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        retry_executor: RetryExecutor | None = None,
    ) -> None:
        self.config = config
        self.progress_sink = progress_sink
        self.logger = logger if logger is not None else default_logger
        self._sleep = sleep
        self.retry_executor = retry_executor or RetryExecutor(
            config.retry_policy,
            logger=self.logger,
            sleep=sleep,
        )

    async def run(
        self,
        ids: Sequence[str],
        operation: OperationFn,
        label: str = "process",
    ) -> BatchResult:
        """Run ``operation`` for every identifier and collect the outcomes."""
        stats = BatchStats(total=len(ids))
        results: list[OperationOutcome] = []

        if not ids:
            stats.finish()
            return _build_result(results, stats)

        groups = chunked(ids, self.config.max_concurrent)
        self.logger.info(
            "batch_started",
            label=label,
            total=len(ids),
            chunks=len(groups),
            max_concurrent=self.config.max_concurrent,
        )

        for chunk_number, group in enumerate(groups, start=1):
            self.logger.info(
                "batch_chunk_started",
                label=label,
                chunk=chunk_number,
                total_chunks=len(groups),
                size=len(group),
            )

            try:
                settled = await asyncio.gather(
                    *(self._run_item(identifier, operation, label) for identifier in group),
                    return_exceptions=True,
                )
            except Exception as exc:
                self.logger.error(
                    "batch_chunk_failed",
                    label=label,
                    chunk=chunk_number,
                    error=str(exc),
                )
                settled = [exc] * len(group)

            for identifier, item in zip(group, settled, strict=True):
                outcome = self._to_outcome(identifier, item, label)
                results.append(outcome)
                stats.record_outcome(outcome)
                self._emit_progress(stats, identifier, outcome, label)

            self.logger.info(
                "batch_chunk_finished",
                label=label,
                chunk=chunk_number,
                successful=stats.completed_successful,
                failed=stats.failed,
            )

            if chunk_number < len(groups) and self.config.rate_limit_delay_ms > 0:
                self.logger.debug(
                    "batch_chunk_delay",
                    label=label,
                    delay_ms=self.config.rate_limit_delay_ms,
                )
                await self._sleep(self.config.rate_limit_delay_ms / 1000.0)

        stats.finish()
        self.logger.info(
            "batch_completed",
            label=label,
            duration_ms=round(stats.duration_ms, 1),
            successful=stats.completed_successful,
            failed=stats.failed,
            skipped=stats.skipped,
        )
        return _build_result(results, stats)

    async def _run_item(
        self,
        identifier: str,
        operation: OperationFn,
        label: str,
    ) -> OperationOutcome:
        context = f"{label} '{identifier}'"
        return await self.retry_executor.execute_with_retry(
            lambda: self._with_timeout(identifier, operation, label),
            context=context,
        )

    async def _with_timeout(
        self,
        identifier: str,
        operation: OperationFn,
        label: str,
    ) -> OperationOutcome:
        timeout = self.config.timeout_seconds
        deadline = asyncio.timeout(timeout)
        try:
            async with deadline:
                return await operation(identifier)
        except TimeoutError as exc:
            # Timeouts raised by the operation itself keep their own message.
            if not deadline.expired():
                raise
            msg = f"TIMEOUT: {label} operation for '{identifier}' timed out after {timeout}s"
            raise OperationTimeoutError(msg) from exc

    def _to_outcome(
        self,
        identifier: str,
        item: object,
        label: str,
    ) -> OperationOutcome:
        if isinstance(item, OperationOutcome):
            if item.id != identifier:
                return item.model_copy(update={"id": identifier})
            return item
        if isinstance(item, BaseException):
            error = str(item) or type(item).__name__
            return OperationOutcome.failure(
                identifier,
                error=error,
                message=f"Failed to {label} '{identifier}': {error}",
            )
        msg = (
            f"Operation for '{identifier}' returned {type(item).__name__}, "
            "expected OperationOutcome"
        )
        return OperationOutcome.failure(identifier, error=msg)

    def _emit_progress(
        self,
        stats: BatchStats,
        identifier: str,
        outcome: OperationOutcome,
        label: str,
    ) -> None:
        if self.progress_sink is None:
            return
        event = ProgressEvent(
            total=stats.total,
            processed=stats.processed,
            successful=stats.completed_successful,
            failed=stats.failed,
            skipped=stats.skipped,
            identifier=identifier,
            label=label,
            outcome=outcome,
        )
        try:
            self.progress_sink(event)
        except Exception as exc:
            self.logger.warning(
                "progress_sink_failed",
                label=label,
                identifier=identifier,
                error=str(exc),
            )


def _build_result(results: list[OperationOutcome], stats: BatchStats) -> BatchResult:
    return BatchResult(
        results=results,
        stats=stats.model_copy(deep=True),
        summary=stats.to_summary(),
    )
