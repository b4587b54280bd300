"""Retry decision logic and exponential backoff computation.

Two pure functions used by the transport:

* :func:`should_retry` -- decide whether a failed request is retryable.
* :func:`compute_backoff` -- compute the delay before the next attempt.
"""

from __future__ import annotations

import random

import httpx

# 409 is Notion's ``conflict_error`` (a colliding transaction); the API
# documents it as safe to retry.
_RETRYABLE_STATUSES: frozenset[int] = frozenset({409, 429, 500, 502, 503, 504})

# Timeouts, connection failures, dropped connections and proxy failures.
_RETRYABLE_EXCEPTIONS: tuple[type[Exception], ...] = (httpx.TransportError,)


def should_retry(
    status_code: int | None,
    exception: Exception | None,
    attempt: int,
    max_attempts: int,
) -> bool:
    """Decide whether a request should be retried.

    Parameters
    ----------
    status_code:
        HTTP status of the response, or ``None`` if no response arrived.
    exception:
        The exception raised while sending, or ``None``.
    attempt:
        The current attempt number (0-indexed).
    max_attempts:
        Maximum total attempts, including the first.
    """
    if attempt + 1 >= max_attempts:
        return False

    if exception is not None:
        return isinstance(exception, _RETRYABLE_EXCEPTIONS)

    if status_code is not None:
        return status_code in _RETRYABLE_STATUSES

    return False


def compute_backoff(
    attempt: int,
    base: float = 1.0,
    maximum: float = 60.0,
    jitter: bool = True,
    retry_after: float | None = None,
) -> float:
    """Compute the delay in seconds before the next retry attempt.

    A server-provided ``Retry-After`` wins; otherwise the delay is
    ``base * 2**attempt`` capped at *maximum*.  With *jitter* the result is
    scaled to a random 50-100 % of itself.
    """
    if retry_after is not None:
        delay = retry_after
    else:
        delay = min(base * (2 ** attempt), maximum)

    if jitter:
        delay *= 0.5 + random.random() * 0.5

    return delay
