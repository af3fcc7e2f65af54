"""Builders for flow operation outcomes.

Flow clients use these so that every implementation reports activation,
deactivation and status results with the same envelope and wording.
"""

from __future__ import annotations

from src.models.flow import FlowStatus, FlowVersionChange, NoOpReason
from src.models.operation_outcome import OperationOutcome


def activated(flow_name: str, previous_version: int, new_version: int) -> OperationOutcome:
    return OperationOutcome(
        id=flow_name,
        success=True,
        message=f"Flow '{flow_name}' activated successfully (version {new_version})",
        payload=FlowVersionChange(
            previous_version=previous_version,
            new_version=new_version,
        ).model_dump(),
    )


def already_active(flow_name: str, version: int) -> OperationOutcome:
    return OperationOutcome(
        id=flow_name,
        success=True,
        message=f"Flow '{flow_name}' is already active (version {version})",
        no_op_reason=NoOpReason.ALREADY_ACTIVE,
        payload=FlowVersionChange(previous_version=version, new_version=version).model_dump(),
    )


def deactivated(flow_name: str, previous_version: int) -> OperationOutcome:
    return OperationOutcome(
        id=flow_name,
        success=True,
        message=f"Flow '{flow_name}' deactivated successfully",
        payload=FlowVersionChange(previous_version=previous_version, new_version=0).model_dump(),
    )


def already_inactive(flow_name: str) -> OperationOutcome:
    return OperationOutcome(
        id=flow_name,
        success=True,
        message=f"Flow '{flow_name}' is already inactive",
        no_op_reason=NoOpReason.ALREADY_INACTIVE,
        payload=FlowVersionChange().model_dump(),
    )


def flow_status(flow_name: str, status: FlowStatus) -> OperationOutcome:
    state = f"active (version {status.active_version})" if status.is_active else "inactive"
    return OperationOutcome(
        id=flow_name,
        success=True,
        message=f"Flow '{flow_name}' is {state}",
        payload=status.model_dump(),
    )


def operation_failed(flow_name: str, action: str, error: str) -> OperationOutcome:
    """Failed outcome for an expected, non-transient failure such as a missing version."""
    return OperationOutcome(
        id=flow_name,
        success=False,
        message=f"Failed to {action} flow '{flow_name}': {error}",
        error=error,
    )
