"""Error hierarchy for wordsync.

Every public error class inherits from :class:`WordSyncError`. Each carries
a machine-readable ``code`` (from :class:`ErrorCode`), a human-readable
``message``, an optional structured ``context`` dict, and an optional
``cause`` (chained exception).

Two families live here:

* **API / transport errors** raised by :mod:`wordsync.notion_api` when a
  Notion request fails.
* **Sync errors** raised by the counting and sync layers.  They wrap the
  API error that triggered them and tell the engine how far the failure
  reaches: a single document (:class:`TraversalError`,
  :class:`RemoteWriteError`, :class:`RemoteReadError`) or the whole run
  (:class:`RemoteListingError`, :class:`StoreError`).
"""

from __future__ import annotations

from enum import Enum
from typing import Any

# ---------------------------------------------------------------------------
# Error code enum
# ---------------------------------------------------------------------------

class ErrorCode(str, Enum):
    """Machine-readable error codes for every error wordsync can raise."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    AUTH_ERROR = "AUTH_ERROR"
    PERMISSION_ERROR = "PERMISSION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    RETRY_EXHAUSTED = "RETRY_EXHAUSTED"
    NETWORK_ERROR = "NETWORK_ERROR"
    REMOTE_LISTING_ERROR = "REMOTE_LISTING_ERROR"
    REMOTE_WRITE_ERROR = "REMOTE_WRITE_ERROR"
    REMOTE_READ_ERROR = "REMOTE_READ_ERROR"
    TRAVERSAL_ERROR = "TRAVERSAL_ERROR"
    STORE_ERROR = "STORE_ERROR"


# ---------------------------------------------------------------------------
# Base error
# ---------------------------------------------------------------------------

class WordSyncError(Exception):
    """Base exception for all wordsync errors.

    Parameters
    ----------
    code:
        A value from :class:`ErrorCode` (or any string) identifying the
        error category.
    message:
        A developer-friendly description of what went wrong.
    context:
        Arbitrary structured data providing extra diagnostic detail.
    cause:
        The underlying exception, if this error wraps another.
    """

    def __init__(
        self,
        code: str,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.code: str = code
        self.message: str = message
        self.context: dict[str, Any] = context or {}
        self.cause: Exception | None = cause
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause

    def __repr__(self) -> str:
        ctx = f", context={self.context!r}" if self.context else ""
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r}{ctx})"


class _CodedError(WordSyncError):
    """Subclasses bind a fixed :class:`ErrorCode` through ``_code``."""

    _code: ErrorCode

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=self._code,
            message=message,
            context=context,
            cause=cause,
        )


# ---------------------------------------------------------------------------
# API / transport errors
# ---------------------------------------------------------------------------

class WordSyncValidationError(_CodedError):
    """Notion API returned 400 (or another non-retryable 4xx).

    Context keys: ``status_code``, ``notion_code``, ``body``.
    """

    _code = ErrorCode.VALIDATION_ERROR


class WordSyncAuthError(_CodedError):
    """Notion API returned 401: the integration token is invalid."""

    _code = ErrorCode.AUTH_ERROR


class WordSyncPermissionError(_CodedError):
    """Notion API returned 403: the integration cannot see the resource.

    Context keys: ``status_code``, ``notion_code``, ``operation``.
    """

    _code = ErrorCode.PERMISSION_ERROR


class WordSyncNotFoundError(_CodedError):
    """Notion API returned 404.

    Context keys: ``status_code``, ``notion_code``, ``path``.
    """

    _code = ErrorCode.NOT_FOUND


class WordSyncRetryExhaustedError(_CodedError):
    """All retry attempts have been exhausted for a retryable request.

    Context keys: ``attempts``, ``last_status_code``.
    """

    _code = ErrorCode.RETRY_EXHAUSTED


class WordSyncNetworkError(_CodedError):
    """A transport-level failure occurred (timeout, DNS, connection reset).

    Context keys: ``url``, ``attempt``.
    """

    _code = ErrorCode.NETWORK_ERROR


# ---------------------------------------------------------------------------
# Sync errors
# ---------------------------------------------------------------------------

class RemoteListingError(_CodedError):
    """Paging through the document listing failed.  Aborts the run.

    Context keys: ``database_id``, ``cursor``.
    """

    _code = ErrorCode.REMOTE_LISTING_ERROR


class RemoteWriteError(_CodedError):
    """Writing the word-count property back to a page failed.

    Scoped to one document; it is retried on the next run.

    Context keys: ``page_id``, ``property``.
    """

    _code = ErrorCode.REMOTE_WRITE_ERROR


class RemoteReadError(_CodedError):
    """Re-reading a page after the write-back failed.

    Scoped to one document.  The snapshot is not updated, so the page is
    reprocessed on the next run even though the write may have landed.

    Context keys: ``page_id``.
    """

    _code = ErrorCode.REMOTE_READ_ERROR


class TraversalError(_CodedError):
    """Listing the children of a block failed mid-walk.

    Scoped to one document; the partial walk is discarded.

    Context keys: ``block_id``, ``cursor``.
    """

    _code = ErrorCode.TRAVERSAL_ERROR


class StoreError(_CodedError):
    """A local persistence operation failed.  Surfaced, never retried.

    Context keys: ``store``, ``operation``, ``path``.
    """

    _code = ErrorCode.STORE_ERROR
