"""Progress event emitted once per settled identifier."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from src.models.operation_outcome import OperationOutcome


class ProgressEvent(BaseModel):
    """Running totals after one identifier settled."""

    model_config = ConfigDict(frozen=True)

    total: int
    processed: int
    successful: int
    failed: int
    skipped: int
    identifier: str
    label: str
    outcome: OperationOutcome

    @property
    def percentage(self) -> float:
        if self.total == 0:
            return 100.0
        return (self.processed / self.total) * 100.0
