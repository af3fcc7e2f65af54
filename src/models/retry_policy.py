"""Retry policy model shared read-only across a batch run."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator, model_validator


class RetryPolicy(BaseModel):
    """How many times to retry a failed operation and how long to wait."""

    model_config = ConfigDict(frozen=True)

    max_retries: int = 3
    base_delay_ms: float = 1000
    max_delay_ms: float = 30000
    exponential_backoff: bool = True
    jitter_factor: float = 0.1

    @field_validator("max_retries")
    @classmethod
    def validate_max_retries(cls, value: int) -> int:
        """Max retries must be zero or more."""
        if value < 0:
            msg = "max_retries must be greater than or equal to 0"
            raise ValueError(msg)
        return value

    @field_validator("base_delay_ms")
    @classmethod
    def validate_base_delay_ms(cls, value: float) -> float:
        """Base delay must be positive."""
        if value <= 0:
            msg = "base_delay_ms must be greater than 0"
            raise ValueError(msg)
        return value

    @field_validator("jitter_factor")
    @classmethod
    def validate_jitter_factor(cls, value: float) -> float:
        """Jitter factor is a fraction between 0.0 and 1.0."""
        if not 0.0 <= value <= 1.0:
            msg = "jitter_factor must be between 0.0 and 1.0"
            raise ValueError(msg)
        return value

    @model_validator(mode="after")
    def validate_delay_bounds(self) -> RetryPolicy:
        """The delay cap cannot be below the base delay."""
        if self.max_delay_ms < self.base_delay_ms:
            msg = "max_delay_ms must be greater than or equal to base_delay_ms"
            raise ValueError(msg)
        return self

    @property
    def max_attempts(self) -> int:
        """Initial attempt plus every retry."""
        return self.max_retries + 1

    @classmethod
    def default(cls) -> RetryPolicy:
        return cls(
            max_retries=3,
            base_delay_ms=1000,
            max_delay_ms=30000,
            exponential_backoff=True,
            jitter_factor=0.1,
        )

    @classmethod
    def aggressive(cls) -> RetryPolicy:
        """More retries, shorter first wait, longer cap."""
        return cls(
            max_retries=5,
            base_delay_ms=500,
            max_delay_ms=60000,
            exponential_backoff=True,
            jitter_factor=0.2,
        )

    @classmethod
    def conservative(cls) -> RetryPolicy:
        """Few retries at a constant interval."""
        return cls(
            max_retries=2,
            base_delay_ms=2000,
            max_delay_ms=15000,
            exponential_backoff=False,
            jitter_factor=0.05,
        )
