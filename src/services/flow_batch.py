"""Flow-level batch operations built on ``BatchProcessor``."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from src.core.errors import UnsupportedOperationError
from src.models.flow import FlowTarget, FlowValidation

if TYPE_CHECKING:
    from collections.abc import Sequence

    from src.models.batch_result import BatchResult
    from src.models.operation_outcome import OperationOutcome
    from src.services.batch_processor import BatchProcessor
    from src.services.protocols import FlowClientProtocol

logger = structlog.get_logger(__name__)


class FlowBatchService:
    """Activates, deactivates and inspects many flows through one client."""

    SUPPORTED_OPERATIONS = ("activate", "deactivate", "status")

    def __init__(self, client: FlowClientProtocol, processor: BatchProcessor) -> None:
        self.client = client
        self.processor = processor

    async def activate_flows(
        self,
        flow_names: Sequence[str],
        target_version: int | None = None,
    ) -> BatchResult:
        async def _activate(flow_name: str) -> OperationOutcome:
            return await self.client.activate_flow(flow_name, target_version)

        return await self.processor.run(flow_names, _activate, "activate")

    async def activate_flows_with_versions(
        self,
        targets: Sequence[FlowTarget],
        global_version: int | None = None,
    ) -> BatchResult:
        """Activate flows, each at its own pinned version or else ``global_version``.

        When the same flow appears twice the first entry wins.
        """
        versions: dict[str, int | None] = {}
        for target in targets:
            versions.setdefault(target.name, target.version)

        async def _activate(flow_name: str) -> OperationOutcome:
            version = versions.get(flow_name)
            return await self.client.activate_flow(
                flow_name,
                version if version is not None else global_version,
            )

        return await self.processor.run(list(versions), _activate, "activate")

    async def deactivate_flows(self, flow_names: Sequence[str]) -> BatchResult:
        return await self.processor.run(flow_names, self.client.deactivate_flow, "deactivate")

    async def get_flow_statuses(self, flow_names: Sequence[str]) -> BatchResult:
        return await self.processor.run(flow_names, self.client.get_flow_status, "status check")

    async def run_operation(self, operation: str, flow_names: Sequence[str]) -> BatchResult:
        """Dispatch a batch operation by name."""
        if operation == "activate":
            return await self.activate_flows(flow_names)
        if operation == "deactivate":
            return await self.deactivate_flows(flow_names)
        if operation == "status":
            return await self.get_flow_statuses(flow_names)
        msg = (
            f"Unsupported batch operation: {operation!r} "
            f"(expected one of {', '.join(self.SUPPORTED_OPERATIONS)})"
        )
        raise UnsupportedOperationError(msg)

    async def validate_flows_exist(self, flow_names: Sequence[str]) -> FlowValidation:
        """Check which flows exist so callers can pre-filter a batch."""
        logger.info("validating_flows", count=len(flow_names))

        validation = FlowValidation()
        for flow_name in flow_names:
            try:
                exists = await self.client.flow_exists(flow_name)
            except Exception as exc:
                logger.warning("flow_validation_failed", flow_name=flow_name, error=str(exc))
                exists = False
            validation.results[flow_name] = exists
            if exists:
                validation.existing.append(flow_name)
            else:
                validation.missing.append(flow_name)

        if validation.missing:
            logger.warning(
                "flows_not_found",
                count=len(validation.missing),
                flows=validation.missing,
            )
        logger.info("flows_validated", existing=len(validation.existing))
        return validation
