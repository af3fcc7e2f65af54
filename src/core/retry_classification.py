"""Pure retry classification and backoff math.

No I/O and no sleeping here. The retry loop itself lives in
``src.utils.retry``.
"""

from __future__ import annotations

import errno
import random
import socket
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

    from src.models.retry_policy import RetryPolicy

# Message fragments that indicate remote contention, unavailability or a
# transport fault. Matched case-insensitively.
RETRYABLE_ERROR_TOKENS: tuple[str, ...] = (
    "UNABLE_TO_LOCK_ROW",
    "SERVER_UNAVAILABLE",
    "REQUEST_RUNNING_TOO_LONG",
    "STORAGE_LIMIT_EXCEEDED",
    "TIMEOUT",
    "NETWORK_ERROR",
    "CONNECTION_RESET",
    "ECONNRESET",
    "ETIMEDOUT",
    "ENOTFOUND",
    "ECONNREFUSED",
)

RETRYABLE_STATUS_CODES: frozenset[int] = frozenset({429, 500, 502, 503, 504})

RETRYABLE_TRANSPORT_CODES: frozenset[str] = frozenset(
    {"ECONNRESET", "ETIMEDOUT", "ENOTFOUND", "ECONNREFUSED"}
)


def extract_status_code(error: BaseException) -> int | None:
    """Return the HTTP status attached to an error, if any.

    Looks at ``error.status_code`` first, then at ``error.response``
    (``status_code`` for requests/httpx style responses, ``status`` for
    aiohttp style ones).
    """
    status = getattr(error, "status_code", None)
    if isinstance(status, int):
        return status

    response = getattr(error, "response", None)
    if response is None:
        return None
    for attr in ("status_code", "status"):
        status = getattr(response, attr, None)
        if isinstance(status, int):
            return status
    return None


def extract_transport_code(error: BaseException) -> str | None:
    """Return a symbolic transport error code such as ``ECONNRESET``."""
    code = getattr(error, "code", None)
    if isinstance(code, str) and code:
        return code.upper()

    # getaddrinfo failures carry negative EAI_* numbers, not errno values
    if isinstance(error, socket.gaierror):
        return "ENOTFOUND"

    err_no = getattr(error, "errno", None)
    if isinstance(err_no, int):
        return errno.errorcode.get(err_no)
    return None


def has_retryable_message(error: BaseException) -> bool:
    """Check the error text for any transient-fault token."""
    message = str(error).upper()
    return any(token in message for token in RETRYABLE_ERROR_TOKENS)


def is_retryable_error(error: BaseException) -> bool:
    """Classify an error as transient (True) or permanent (False)."""
    if has_retryable_message(error):
        return True
    if extract_status_code(error) in RETRYABLE_STATUS_CODES:
        return True
    return extract_transport_code(error) in RETRYABLE_TRANSPORT_CODES


def compute_backoff_delay(
    policy: RetryPolicy,
    attempt_index: int,
    rng: Callable[[], float] = random.random,
) -> float:
    """Compute the delay in milliseconds before retry number ``attempt_index``.

    ``attempt_index`` is zero-based: 0 is the first retry after the initial
    failure. Jitter is added before clamping, so the result never exceeds
    ``policy.max_delay_ms``.
    """
    if attempt_index < 0:
        msg = "attempt_index must be non-negative"
        raise ValueError(msg)

    if policy.exponential_backoff:
        delay = policy.base_delay_ms * (2**attempt_index)
    else:
        delay = policy.base_delay_ms

    delay += rng() * policy.jitter_factor * delay
    return float(min(delay, policy.max_delay_ms))
