"""Async HTTP transport for the Notion API.

Request lifecycle:

1. Acquire a token-bucket slot (await if needed).
2. Send the request with auth and ``Notion-Version`` headers.
3. On ``2xx`` -- return the parsed JSON body (a non-JSON body is a
   :class:`WordSyncValidationError`).
4. On ``429`` -- honour ``Retry-After``, sleep, and retry.
5. On ``409`` / ``5xx`` / any ``httpx.TransportError`` -- exponential backoff and retry.
6. On any other ``4xx`` -- raise the matching typed error immediately.
7. Out of attempts -- raise :class:`WordSyncRetryExhaustedError`.
"""

from __future__ import annotations

import asyncio
import json as _json
import sys
import time
from typing import Any

import httpx

from wordsync.config import WordSyncConfig
from wordsync.errors import (
    WordSyncAuthError,
    WordSyncNetworkError,
    WordSyncNotFoundError,
    WordSyncPermissionError,
    WordSyncRetryExhaustedError,
    WordSyncValidationError,
)
from wordsync.observability import NoopMetricsHook, get_logger

from .rate_limit import AsyncTokenBucket
from .retries import _RETRYABLE_STATUSES, compute_backoff, should_retry

log = get_logger("wordsync.transport")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _parse_retry_after(response: httpx.Response) -> float | None:
    """Extract the ``Retry-After`` header value as a float, or ``None``."""
    raw = response.headers.get("retry-after")
    if raw is None:
        return None
    try:
        return float(raw)
    except (ValueError, TypeError):
        return None


def _parse_json_body(response: httpx.Response, method: str, path: str) -> dict:
    """Decode a 2xx body, raising :class:`WordSyncValidationError` when it is
    not a JSON object (e.g. an HTML page from a proxy)."""
    try:
        body = response.json()
    except ValueError as exc:
        raise WordSyncValidationError(
            message=f"Malformed response body on {method} {path}: {exc}",
            context={"status_code": response.status_code, "body": response.text[:500]},
            cause=exc,
        ) from exc
    if not isinstance(body, dict):
        raise WordSyncValidationError(
            message=f"Unexpected response body on {method} {path}: expected a JSON object",
            context={"status_code": response.status_code, "body": response.text[:500]},
        )
    return body


def _raise_for_status(response: httpx.Response, method: str, path: str) -> None:
    """Raise the typed error for a non-retryable 4xx response."""
    status = response.status_code
    try:
        body = response.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}

    notion_message = body.get("message", response.text[:500])
    notion_code = body.get("code", "")

    if status == 401:
        raise WordSyncAuthError(
            message=f"Authentication failed on {method} {path}: {notion_message}",
            context={"status_code": status, "notion_code": notion_code},
        )
    if status == 403:
        raise WordSyncPermissionError(
            message=f"Permission denied on {method} {path}: {notion_message}",
            context={
                "status_code": status,
                "notion_code": notion_code,
                "operation": f"{method} {path}",
            },
        )
    if status == 404:
        raise WordSyncNotFoundError(
            message=f"Resource not found on {method} {path}: {notion_message}",
            context={"status_code": status, "notion_code": notion_code, "path": path},
        )

    prefix = "Validation error" if status == 400 else f"Client error {status}"
    raise WordSyncValidationError(
        message=f"{prefix} on {method} {path}: {notion_message}",
        context={"status_code": status, "notion_code": notion_code, "body": body},
    )


def _dump_payload(
    method: str,
    url: str,
    payload: dict | None,
    response_status: int | None,
    response_body: Any | None,
    token: str | None = None,
) -> None:
    """Write a redacted debug dump of the request/response to stderr."""
    from wordsync.utils.redact import redact

    dump: dict[str, Any] = {
        "method": method,
        "url": url,
    }
    if payload is not None:
        dump["request_body"] = payload
    if response_status is not None:
        dump["response_status"] = response_status
    if response_body is not None:
        dump["response_body"] = response_body
    print(
        _json.dumps(redact(dump, token), indent=2, default=str),
        file=sys.stderr,
    )


def _emit_debug_dump(
    config: WordSyncConfig,
    method: str,
    response: httpx.Response,
    json_payload: Any,
) -> None:
    if not config.debug_dump_payload:
        return
    try:
        resp_body = response.json()
    except ValueError:
        resp_body = response.text[:1000]
    _dump_payload(
        method, str(response.url), json_payload,
        response.status_code, resp_body,
        token=config.token,
    )


# ---------------------------------------------------------------------------
# Async transport
# ---------------------------------------------------------------------------

class AsyncNotionTransport:
    """Asynchronous HTTP transport with auth, retry, and rate limiting.

    Parameters
    ----------
    config:
        A :class:`WordSyncConfig` controlling all transport behaviour.
    """

    def __init__(self, config: WordSyncConfig) -> None:
        self._config = config
        self._bucket = AsyncTokenBucket(
            rate_rps=config.rate_limit_rps,
            burst=10,
        )
        self._metrics = config.metrics if config.metrics is not None else NoopMetricsHook()

        proxy: httpx.URL | str | None = config.http_proxy
        self._client = httpx.AsyncClient(
            base_url=config.base_url,
            headers={
                "Authorization": f"Bearer {config.token}",
                "Notion-Version": config.notion_version,
                "Content-Type": "application/json",
            },
            timeout=httpx.Timeout(config.timeout_seconds),
            proxy=proxy,
        )

    # -- public API --------------------------------------------------------

    async def request(self, method: str, path: str, **kwargs: Any) -> dict:
        """Execute an HTTP request against the Notion API.

        Parameters
        ----------
        method:
            HTTP method (``GET``, ``POST``, ``PATCH``).
        path:
            API path relative to ``base_url`` (e.g. ``/pages/{id}``).
        **kwargs:
            Forwarded to :meth:`httpx.AsyncClient.request` (``json=``,
            ``params=``, ``headers=``).

        Returns
        -------
        dict
            Parsed JSON response body (``{}`` for empty responses).

        Raises
        ------
        WordSyncAuthError
            On 401 responses.
        WordSyncPermissionError
            On 403 responses.
        WordSyncNotFoundError
            On 404 responses.
        WordSyncValidationError
            On 400 and other non-retryable 4xx responses, or a 2xx whose
            body is not a JSON object.
        WordSyncRetryExhaustedError
            When every attempt hit a retryable status.
        WordSyncNetworkError
            When the final attempt failed at the transport level.
        """
        max_attempts = self._config.retry_max_attempts
        last_exception: Exception | None = None
        last_status: int | None = None

        json_payload = kwargs.get("json")

        for attempt in range(max_attempts):
            # 1. Rate-limit pacing
            wait = await self._bucket.acquire()
            if wait > 0:
                self._metrics.timing(
                    "wordsync.rate_limit_wait_ms",
                    wait * 1000,
                    tags={"method": method, "path": path},
                )

            # 2. Send request
            t0 = time.monotonic()
            try:
                response = await self._client.request(method, path, **kwargs)
                elapsed_ms = (time.monotonic() - t0) * 1000
            except httpx.TransportError as exc:
                last_exception = exc
                last_status = None
                delay = self._handle_network_exception(method, path, exc, attempt)
                await asyncio.sleep(delay)
                continue

            # 3. Process response
            last_status = response.status_code
            last_exception = None
            tags = {"method": method, "path": path, "status": str(response.status_code)}
            self._metrics.increment("wordsync.requests_total", tags=tags)
            self._metrics.timing("wordsync.request_duration_ms", elapsed_ms, tags=tags)

            _emit_debug_dump(self._config, method, response, json_payload)

            if 200 <= response.status_code < 300:
                if response.status_code == 204 or not response.content:
                    return {}
                return _parse_json_body(response, method, path)

            if response.status_code not in _RETRYABLE_STATUSES:
                _raise_for_status(response, method, path)

            if not should_retry(response.status_code, None, attempt, max_attempts):
                break

            retry_after: float | None = None
            reason = "server_error"
            if response.status_code == 409:
                reason = "conflict"
            elif response.status_code == 429:
                retry_after = _parse_retry_after(response)
                reason = "rate_limited"
                self._metrics.increment(
                    "wordsync.rate_limited_total",
                    tags={"method": method, "path": path},
                )
                log.warning(
                    "Rate limited by Notion API",
                    extra={
                        "extra_fields": {
                            "op": "request",
                            "method": method,
                            "path": path,
                            "status_code": 429,
                            "retry_after": retry_after,
                            "attempt": attempt + 1,
                        }
                    },
                )

            delay = compute_backoff(
                attempt,
                base=self._config.retry_base_delay,
                maximum=self._config.retry_max_delay,
                jitter=self._config.retry_jitter,
                retry_after=retry_after,
            )
            self._metrics.increment(
                "wordsync.retries_total",
                tags={"method": method, "path": path, "reason": reason},
            )
            await asyncio.sleep(delay)

        # 4. All attempts exhausted.
        ctx: dict[str, Any] = {
            "attempts": max_attempts,
            "last_status_code": last_status,
        }
        if last_exception is not None:
            raise WordSyncRetryExhaustedError(
                message=(
                    f"All {max_attempts} attempts exhausted for {method} {path} "
                    f"(last error: {last_exception})"
                ),
                context=ctx,
                cause=last_exception,
            )
        raise WordSyncRetryExhaustedError(
            message=(
                f"All {max_attempts} attempts exhausted for {method} {path} "
                f"(last status: {last_status})"
            ),
            context=ctx,
        )

    async def close(self) -> None:
        """Close the underlying async HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> AsyncNotionTransport:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    # -- internals ---------------------------------------------------------

    def _handle_network_exception(
        self,
        method: str,
        path: str,
        exc: Exception,
        attempt: int,
    ) -> float:
        """Return the backoff delay for a retryable network error, or raise
        :class:`WordSyncNetworkError` once attempts run out."""
        self._metrics.increment(
            "wordsync.requests_total",
            tags={"method": method, "path": path, "status": "error"},
        )
        log.warning(
            "Request network error",
            extra={
                "extra_fields": {
                    "op": "request",
                    "method": method,
                    "path": path,
                    "attempt": attempt + 1,
                    "error": str(exc),
                }
            },
        )
        if should_retry(None, exc, attempt, self._config.retry_max_attempts):
            self._metrics.increment(
                "wordsync.retries_total",
                tags={"method": method, "path": path, "reason": "network_error"},
            )
            return compute_backoff(
                attempt,
                base=self._config.retry_base_delay,
                maximum=self._config.retry_max_delay,
                jitter=self._config.retry_jitter,
            )
        raise WordSyncNetworkError(
            message=f"Network error on {method} {path}: {exc}",
            context={"url": path, "attempt": attempt + 1},
            cause=exc,
        ) from exc
