"""Shared test fixtures for the flow batch manager."""

from __future__ import annotations

from typing import Any

import pytest

from src.core import flow_outcomes
from src.core.errors import RemoteOperationError
from src.models.batch_config import BatchConfig
from src.models.flow import FlowStatus
from src.models.operation_outcome import OperationOutcome
from src.models.retry_policy import RetryPolicy


class SleepRecorder:
    """Async stand-in for ``asyncio.sleep`` that records delays and returns at once."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


class InMemoryFlowClient:
    """Flow client backed by a dict of flow name -> (active_version, latest_version).

    ``failures`` maps a flow name to a list of exceptions raised by successive
    calls before the real behavior kicks in. ``exists_failures`` maps a flow
    name to an error raised by every existence check for it.
    """

    def __init__(self, flows: dict[str, tuple[int, int]]) -> None:
        self.flows = dict(flows)
        self.failures: dict[str, list[Exception]] = {}
        self.exists_failures: dict[str, Exception] = {}
        self.calls: list[tuple[str, str, Any]] = []

    def _maybe_fail(self, flow_name: str) -> None:
        pending = self.failures.get(flow_name)
        if pending:
            raise pending.pop(0)

    def _require(self, flow_name: str) -> tuple[int, int]:
        if flow_name not in self.flows:
            msg = f"Flow '{flow_name}' not found"
            raise RemoteOperationError(msg, status_code=404)
        return self.flows[flow_name]

    async def activate_flow(
        self,
        flow_name: str,
        target_version: int | None = None,
    ) -> OperationOutcome:
        self.calls.append(("activate", flow_name, target_version))
        self._maybe_fail(flow_name)
        active, latest = self._require(flow_name)
        if latest == 0:
            return flow_outcomes.operation_failed(flow_name, "activate", "No versions found")
        version = target_version or latest
        if active == version:
            return flow_outcomes.already_active(flow_name, active)
        self.flows[flow_name] = (version, latest)
        return flow_outcomes.activated(flow_name, active, version)

    async def deactivate_flow(self, flow_name: str) -> OperationOutcome:
        self.calls.append(("deactivate", flow_name, None))
        self._maybe_fail(flow_name)
        active, latest = self._require(flow_name)
        if active == 0:
            return flow_outcomes.already_inactive(flow_name)
        self.flows[flow_name] = (0, latest)
        return flow_outcomes.deactivated(flow_name, active)

    async def get_flow_status(self, flow_name: str) -> OperationOutcome:
        self.calls.append(("status", flow_name, None))
        self._maybe_fail(flow_name)
        active, latest = self._require(flow_name)
        status = FlowStatus(is_active=active > 0, active_version=active, latest_version=latest)
        return flow_outcomes.flow_status(flow_name, status)

    async def flow_exists(self, flow_name: str) -> bool:
        self.calls.append(("exists", flow_name, None))
        if flow_name in self.exists_failures:
            raise self.exists_failures[flow_name]
        return flow_name in self.flows


@pytest.fixture
def sleep_recorder() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def fast_retry_policy() -> RetryPolicy:
    """Deterministic policy: no jitter, 100ms base doubling up to 1s."""
    return RetryPolicy(
        max_retries=3,
        base_delay_ms=100,
        max_delay_ms=1000,
        exponential_backoff=True,
        jitter_factor=0.0,
    )


@pytest.fixture
def batch_config(fast_retry_policy: RetryPolicy) -> BatchConfig:
    return BatchConfig(
        max_concurrent=2,
        rate_limit_delay_ms=50,
        timeout_seconds=5,
        retry_policy=fast_retry_policy,
    )


@pytest.fixture
def flow_client() -> InMemoryFlowClient:
    return InMemoryFlowClient(
        {
            "Inactive_Flow": (0, 3),
            "Active_Flow": (2, 2),
            "Outdated_Flow": (1, 4),
            "Empty_Flow": (0, 0),
        }
    )
