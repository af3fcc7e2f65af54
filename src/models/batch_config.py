"""Immutable configuration for a batch processor."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.models.retry_policy import RetryPolicy


class BatchConfig(BaseModel):
    """Group size, pacing and per-item limits for a batch run."""

    model_config = ConfigDict(frozen=True)

    max_concurrent: int = 3
    rate_limit_delay_ms: float = 1000
    timeout_seconds: float = 300
    retry_policy: RetryPolicy = Field(default_factory=RetryPolicy.default)

    @field_validator("max_concurrent")
    @classmethod
    def validate_max_concurrent(cls, value: int) -> int:
        """Group size must be at least 1."""
        if value < 1:
            msg = "max_concurrent must be greater than or equal to 1"
            raise ValueError(msg)
        return value

    @field_validator("rate_limit_delay_ms")
    @classmethod
    def validate_rate_limit_delay_ms(cls, value: float) -> float:
        """Pause between groups cannot be negative."""
        if value < 0:
            msg = "rate_limit_delay_ms must be greater than or equal to 0"
            raise ValueError(msg)
        return value

    @field_validator("timeout_seconds")
    @classmethod
    def validate_timeout_seconds(cls, value: float) -> float:
        """Per-item deadline must be positive."""
        if value <= 0:
            msg = "timeout_seconds must be greater than 0"
            raise ValueError(msg)
        return value
