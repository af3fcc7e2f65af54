"""Progress tracking sink for batch operations."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from src.utils.logger import get_logger

if TYPE_CHECKING:
    from src.models.progress_event import ProgressEvent

logger = get_logger(__name__)


@dataclass
class ProgressTracker:
    """Progress sink that mirrors batch counters and logs them periodically.

    Pass an instance as ``progress_sink`` to ``BatchProcessor``; it is called
    once per settled identifier. Events themselves are only kept when
    ``keep_events`` is set.
    """

    total: int = 0
    every_n: int = 10
    keep_events: bool = False
    processed: int = 0
    successful: int = 0
    failed: int = 0
    skipped: int = 0
    errors: list[str] = field(default_factory=list)
    events: list[ProgressEvent] = field(default_factory=list)
    start_time: float = field(default_factory=time.monotonic)

    def __post_init__(self) -> None:
        if self.every_n < 1:
            msg = "every_n must be greater than or equal to 1"
            raise ValueError(msg)

    def __call__(self, event: ProgressEvent) -> None:
        self.total = event.total
        self.processed = event.processed
        self.successful = event.successful
        self.failed = event.failed
        self.skipped = event.skipped
        if self.keep_events:
            self.events.append(event)
        if not event.outcome.success:
            self.errors.append(f"{event.identifier}: {event.outcome.error}")
        self.log_progress(event.label)

    @property
    def elapsed_seconds(self) -> float:
        """Time elapsed since start."""
        return time.monotonic() - self.start_time

    @property
    def progress_percentage(self) -> float:
        """Percentage of total items processed."""
        if self.total == 0:
            return 100.0
        return (self.processed / self.total) * 100.0

    @property
    def success_rate(self) -> float:
        """Percentage of processed items that succeeded, skipped ones included."""
        if self.processed == 0:
            return 0.0
        return (self.successful / self.processed) * 100.0

    def log_progress(self, label: str = "") -> None:
        """Log progress every N items and on the last one."""
        if self.processed % self.every_n == 0 or self.processed == self.total:
            logger.info(
                "batch_progress",
                label=label,
                processed=self.processed,
                total=self.total,
                successful=self.successful,
                failed=self.failed,
                skipped=self.skipped,
                percentage=f"{self.progress_percentage:.1f}%",
                elapsed=f"{self.elapsed_seconds:.1f}s",
            )

    def summary(self) -> dict[str, int | float | list[str]]:
        """Return summary statistics."""
        return {
            "processed": self.processed,
            "successful": self.successful,
            "failed": self.failed,
            "skipped": self.skipped,
            "success_rate": round(self.success_rate, 1),
            "duration_seconds": round(self.elapsed_seconds, 2),
            "errors": self.errors,
        }
