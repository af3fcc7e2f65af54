"""Per-identifier result envelope returned by batch operations."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class OperationOutcome(BaseModel):
    """Result of running one operation against one identifier.

    ``no_op_reason`` tags a successful outcome that changed nothing (for
    example ``already_active``). ``payload`` carries operation-specific data
    that the batch layer never inspects; callers decode it with the model
    that matches the operation they ran.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    success: bool
    message: str = ""
    error: str | None = None
    no_op_reason: str | None = None
    payload: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def default_error_from_message(cls, data: Any) -> Any:
        """A failed outcome always carries an error; fall back to its message."""
        if isinstance(data, dict) and data.get("success") is False and not data.get("error"):
            data = {**data, "error": data.get("message") or "Unknown error"}
        return data

    @model_validator(mode="after")
    def validate_error_matches_success(self) -> OperationOutcome:
        """Successful outcomes cannot carry an error."""
        if self.success and self.error is not None:
            msg = "error must be None when success is True"
            raise ValueError(msg)
        return self

    @property
    def is_no_op(self) -> bool:
        """True when the operation succeeded without changing anything."""
        return self.success and self.no_op_reason is not None

    @classmethod
    def failure(cls, identifier: str, error: str, message: str | None = None) -> OperationOutcome:
        """Build a failed outcome for ``identifier``."""
        return cls(id=identifier, success=False, message=message or error, error=error)
