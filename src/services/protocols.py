"""Service protocols defining interfaces for dependency injection."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Protocol

from src.models.operation_outcome import OperationOutcome
from src.models.progress_event import ProgressEvent

OperationFn = Callable[[str], Awaitable[OperationOutcome]]


class ProgressSink(Protocol):
    """Receives one event per settled identifier."""

    def __call__(self, event: ProgressEvent) -> None: ...


class FlowClientProtocol(Protocol):
    """Protocol for remote flow management clients.

    Implementations report expected business failures (missing versions,
    restricted flows) as failed outcomes and raise for transport or remote
    errors, preferably ``RemoteOperationError`` with a status code.
    """

    async def activate_flow(
        self,
        flow_name: str,
        target_version: int | None = None,
    ) -> OperationOutcome: ...

    async def deactivate_flow(self, flow_name: str) -> OperationOutcome: ...

    async def get_flow_status(self, flow_name: str) -> OperationOutcome: ...

    async def flow_exists(self, flow_name: str) -> bool: ...
