"""Pydantic data models for the flow batch manager."""

from src.models.batch_config import BatchConfig
from src.models.batch_result import BatchError, BatchResult, BatchStats, BatchSummary
from src.models.config import Config
from src.models.flow import (
    FlowStatus,
    FlowTarget,
    FlowValidation,
    FlowVersionChange,
    NoOpReason,
)
from src.models.operation_outcome import OperationOutcome
from src.models.progress_event import ProgressEvent
from src.models.retry_policy import RetryPolicy

__all__ = [
    "BatchConfig",
    "BatchError",
    "BatchResult",
    "BatchStats",
    "BatchSummary",
    "Config",
    "FlowStatus",
    "FlowTarget",
    "FlowValidation",
    "FlowVersionChange",
    "NoOpReason",
    "OperationOutcome",
    "ProgressEvent",
    "RetryPolicy",
]
