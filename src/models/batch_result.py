"""Batch statistics, summary and result models."""

from __future__ import annotations

import time

from pydantic import BaseModel, ConfigDict, Field

from src.models.operation_outcome import OperationOutcome


class BatchError(BaseModel):
    """One failed identifier and the reason it failed."""

    model_config = ConfigDict(frozen=True)

    id: str
    error: str


class BatchStats(BaseModel):
    """Running counters for a single batch run.

    Created fresh by each run and mutated only by that run.
    """

    total: int = 0
    completed_successful: int = 0
    failed: int = 0
    skipped: int = 0
    start_time: float = Field(default_factory=time.monotonic)
    end_time: float | None = None
    errors: list[BatchError] = Field(default_factory=list)

    @property
    def processed(self) -> int:
        """Identifiers that have settled so far."""
        return self.completed_successful + self.failed

    @property
    def duration_ms(self) -> float:
        """Elapsed time, up to ``end_time`` once the run is finished."""
        end = self.end_time if self.end_time is not None else time.monotonic()
        return (end - self.start_time) * 1000.0

    def record_outcome(self, outcome: OperationOutcome) -> None:
        """Count a settled outcome."""
        if outcome.success:
            self.completed_successful += 1
            if outcome.is_no_op:
                self.skipped += 1
        else:
            self.record_failure(outcome.id, outcome.error or outcome.message)

    def record_failure(self, identifier: str, error: str) -> None:
        """Count a failure that has no outcome of its own."""
        self.failed += 1
        self.errors.append(BatchError(id=identifier, error=error))

    def finish(self) -> None:
        self.end_time = time.monotonic()

    def to_summary(self) -> BatchSummary:
        return BatchSummary(
            total=self.total,
            successful=self.completed_successful,
            failed=self.failed,
            skipped=self.skipped,
            duration_ms=round(self.duration_ms, 2),
            errors=list(self.errors),
        )


class BatchSummary(BaseModel):
    """Statistics from a batch processing operation."""

    model_config = ConfigDict(frozen=True)

    total: int
    successful: int
    failed: int
    skipped: int
    duration_ms: float
    errors: list[BatchError] = []

    def exit_code(self, continue_on_error: bool = False) -> int:
        """Process exit status for a command that ran this batch."""
        if self.failed > 0 and not continue_on_error:
            return 1
        return 0


class BatchResult(BaseModel):
    """Everything a batch run produced.

    ``results`` follows group order, then position within the group. Callers
    that need input order must re-sort by ``id``.
    """

    model_config = ConfigDict(frozen=True)

    results: list[OperationOutcome]
    stats: BatchStats
    summary: BatchSummary
