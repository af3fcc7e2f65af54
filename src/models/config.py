"""Application configuration model using pydantic-settings."""

from __future__ import annotations

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.models.batch_config import BatchConfig
from src.models.retry_policy import RetryPolicy


class Config(BaseSettings):
    """Batch and logging settings loaded from ``SF_*`` environment variables and .env."""

    model_config = SettingsConfigDict(
        env_prefix="SF_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    max_concurrent: int = 3
    rate_limit_delay_ms: int = 1000
    max_retries: int = 3
    timeout_seconds: int = 300
    retry_base_delay_ms: int = 1000
    retry_max_delay_ms: int = 30000
    retry_jitter_factor: float = 0.1
    exponential_backoff: bool = True
    log_level: str = "INFO"
    json_logs: bool = False

    @field_validator("max_concurrent")
    @classmethod
    def validate_max_concurrent(cls, value: int) -> int:
        """Max concurrent operations must be between 1 and 10."""
        if value < 1 or value > 10:
            msg = "max_concurrent must be between 1 and 10"
            raise ValueError(msg)
        return value

    @field_validator("rate_limit_delay_ms")
    @classmethod
    def validate_rate_limit_delay_ms(cls, value: int) -> int:
        """Rate limit delay must be non-negative."""
        if value < 0:
            msg = "rate_limit_delay_ms must be non-negative"
            raise ValueError(msg)
        return value

    @field_validator("max_retries")
    @classmethod
    def validate_max_retries(cls, value: int) -> int:
        """Max retries must be between 0 and 10."""
        if value < 0 or value > 10:
            msg = "max_retries must be between 0 and 10"
            raise ValueError(msg)
        return value

    @field_validator("timeout_seconds")
    @classmethod
    def validate_timeout_seconds(cls, value: int) -> int:
        """Per-operation timeout must be between 10 and 3600 seconds."""
        if value < 10 or value > 3600:
            msg = "timeout_seconds must be between 10 and 3600"
            raise ValueError(msg)
        return value

    @field_validator("retry_base_delay_ms")
    @classmethod
    def validate_retry_base_delay_ms(cls, value: int) -> int:
        """Base retry delay must be positive."""
        if value <= 0:
            msg = "retry_base_delay_ms must be greater than 0"
            raise ValueError(msg)
        return value

    @field_validator("retry_jitter_factor")
    @classmethod
    def validate_retry_jitter_factor(cls, value: float) -> float:
        """Jitter factor must be between 0.0 and 1.0."""
        if not 0.0 <= value <= 1.0:
            msg = "retry_jitter_factor must be between 0.0 and 1.0"
            raise ValueError(msg)
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Log level must be a valid Python logging level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_value = value.upper()
        if upper_value not in valid_levels:
            msg = f"log_level must be one of {', '.join(sorted(valid_levels))}"
            raise ValueError(msg)
        return upper_value

    @model_validator(mode="after")
    def validate_retry_delay_bounds(self) -> Config:
        """Retry delay cap cannot be below the base delay."""
        if self.retry_max_delay_ms < self.retry_base_delay_ms:
            msg = "retry_max_delay_ms must be greater than or equal to retry_base_delay_ms"
            raise ValueError(msg)
        return self

    def to_retry_policy(self) -> RetryPolicy:
        return RetryPolicy(
            max_retries=self.max_retries,
            base_delay_ms=self.retry_base_delay_ms,
            max_delay_ms=self.retry_max_delay_ms,
            exponential_backoff=self.exponential_backoff,
            jitter_factor=self.retry_jitter_factor,
        )

    def to_batch_config(self) -> BatchConfig:
        """Build the immutable processor configuration from these settings."""
        return BatchConfig(
            max_concurrent=self.max_concurrent,
            rate_limit_delay_ms=self.rate_limit_delay_ms,
            timeout_seconds=self.timeout_seconds,
            retry_policy=self.to_retry_policy(),
        )
