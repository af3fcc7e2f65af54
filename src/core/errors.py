"""Exception types raised by the batch orchestration layer."""

from __future__ import annotations


class FlowBatchError(Exception):
    """Base class for errors raised by this package."""


class RemoteOperationError(FlowBatchError):
    """Raised by flow clients when a remote call fails.

    ``status_code`` is the HTTP status of the failed response, if any.
    ``code`` is a low-level transport code such as ``ECONNRESET``.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        code: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.code = code


class OperationTimeoutError(FlowBatchError, TimeoutError):
    """Raised when a single operation exceeds its deadline."""


class RetryBudgetExhaustedError(FlowBatchError):
    """Raised when an operation still fails after every allowed retry."""

    def __init__(self, retries: int, last_error: BaseException) -> None:
        super().__init__(f"Operation failed after {retries} retries: {last_error}")
        self.retries = retries
        self.last_error = last_error


class UnsupportedOperationError(FlowBatchError, ValueError):
    """Raised when a caller asks for a batch operation that does not exist."""
