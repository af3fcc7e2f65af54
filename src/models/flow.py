"""Flow-specific payloads carried inside ``OperationOutcome.payload``."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator


class NoOpReason(StrEnum):
    """Why a flow operation succeeded without changing anything."""

    ALREADY_ACTIVE = "already_active"
    ALREADY_INACTIVE = "already_inactive"


class FlowVersionChange(BaseModel):
    """Version transition produced by an activate or deactivate call."""

    model_config = ConfigDict(frozen=True)

    previous_version: int = 0
    new_version: int = 0


class FlowStatus(BaseModel):
    """Activation state of a single flow."""

    model_config = ConfigDict(frozen=True)

    is_active: bool
    active_version: int = 0
    latest_version: int = 0
    flow_type: str = "Flow"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def has_newer_version(self) -> bool:
        return self.latest_version > self.active_version


class FlowTarget(BaseModel):
    """A flow to activate, optionally pinned to a version."""

    model_config = ConfigDict(frozen=True)

    name: str
    version: int | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        """Flow name must be non-empty."""
        if not value.strip():
            msg = "name must not be empty"
            raise ValueError(msg)
        return value.strip()

    @field_validator("version")
    @classmethod
    def validate_version(cls, value: int | None) -> int | None:
        """Pinned versions start at 1."""
        if value is not None and value < 1:
            msg = "version must be greater than or equal to 1"
            raise ValueError(msg)
        return value


class FlowValidation(BaseModel):
    """Existence check results for a set of flow names."""

    existing: list[str] = Field(default_factory=list)
    missing: list[str] = Field(default_factory=list)
    results: dict[str, bool] = Field(default_factory=dict)

    @property
    def all_exist(self) -> bool:
        return not self.missing
