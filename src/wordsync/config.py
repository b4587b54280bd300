"""Configuration for wordsync.

:class:`WordSyncConfig` is a plain dataclass that captures every tuneable
knob: Notion credentials and target database, the property the count is
written to, where the two local SQLite stores live, and the transport's
retry / pacing / timeout behaviour.

:meth:`WordSyncConfig.from_env` builds an instance from environment
variables (``NOTION_API_KEY``, ``NOTION_DATABASE_ID`` and the optional
``WORDSYNC_*`` overrides listed in :data:`ENV_VARS`).
"""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

DEFAULT_WORD_COUNT_PROPERTY = "Word Count"

ENV_VARS: dict[str, str] = {
    "token": "NOTION_API_KEY",
    "database_id": "NOTION_DATABASE_ID",
    "word_count_property": "WORDSYNC_PROPERTY",
    "snapshot_db_path": "WORDSYNC_SNAPSHOT_DB",
    "history_db_path": "WORDSYNC_HISTORY_DB",
    "log_level": "WORDSYNC_LOG_LEVEL",
}
"""Mapping of config field name to the environment variable it is read from."""


# ---------------------------------------------------------------------------
# Configuration dataclass
# ---------------------------------------------------------------------------

@dataclass
class WordSyncConfig:
    """Complete configuration for a wordsync client.

    Parameters
    ----------
    token:
        Notion integration token.  Never logged.
    database_id:
        The Notion database whose pages are synchronised.
    notion_version:
        Value of the ``Notion-Version`` header.  The database-query
        endpoint used by the engine belongs to ``2022-06-28``.
    base_url:
        API root URL.  Override for proxy or testing environments.
    word_count_property:
        Name of the *Number* property each page's count is written to.
    snapshot_db_path:
        SQLite file holding one ``(id, last_edited_time, word_count)`` row
        per page ever processed.
    history_db_path:
        SQLite file holding the append-only ``(timestamp, total_words)`` log.
    page_size:
        ``page_size`` sent on every paginated listing call (1-100).
    retry_max_attempts:
        Maximum number of attempts per request for retryable errors.
    retry_base_delay:
        Base delay (seconds) for exponential backoff.
    retry_max_delay:
        Upper cap (seconds) on computed backoff delay.
    retry_jitter:
        Randomly scale backoff intervals to 50-100 % of their value.
    rate_limit_rps:
        Target requests per second for client-side pacing (token bucket).
    timeout_seconds:
        HTTP request timeout in seconds.
    http_proxy:
        Optional HTTP/HTTPS proxy URL.
    metrics:
        Optional :class:`~wordsync.observability.MetricsHook` backend.
    log_level:
        Level applied to the ``wordsync`` logger by the CLI.
    debug_dump_payload:
        Write the (redacted) request/response of every API call to *stderr*.
    """

    # ── Core ────────────────────────────────────────────────────────────
    token: str = ""

    database_id: str = ""

    notion_version: str = "2022-06-28"

    base_url: str = "https://api.notion.com/v1"

    word_count_property: str = DEFAULT_WORD_COUNT_PROPERTY

    # ── Local stores ────────────────────────────────────────────────────
    snapshot_db_path: str = "notion.db"

    history_db_path: str = "wordcount.db"

    # ── Pagination ──────────────────────────────────────────────────────
    page_size: int = 100

    # ── Retry & rate ────────────────────────────────────────────────────
    retry_max_attempts: int = 5

    retry_base_delay: float = 1.0

    retry_max_delay: float = 60.0

    retry_jitter: bool = True

    rate_limit_rps: float = 3.0

    # ── HTTP ────────────────────────────────────────────────────────────
    timeout_seconds: float = 30.0

    http_proxy: str | None = None

    # ── Observability ──────────────────────────────────────────────────
    metrics: Any | None = None

    log_level: str = "INFO"

    debug_dump_payload: bool = False

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        from urllib.parse import urlparse

        parsed = urlparse(self.base_url)
        if parsed.scheme == "http" and parsed.hostname not in (
            "localhost",
            "127.0.0.1",
            "::1",
        ):
            raise ValueError(
                f"base_url uses insecure HTTP for non-local host '{parsed.hostname}'. "
                "Use HTTPS to protect your API token, or target localhost for testing."
            )

        if not self.word_count_property:
            raise ValueError("word_count_property must not be empty")
        if not 1 <= self.page_size <= 100:
            raise ValueError(f"page_size must be between 1 and 100, got {self.page_size}")
        if self.retry_max_attempts < 1:
            raise ValueError(f"retry_max_attempts must be >= 1, got {self.retry_max_attempts}")
        if self.retry_base_delay < 0:
            raise ValueError(f"retry_base_delay must be >= 0, got {self.retry_base_delay}")
        if self.retry_max_delay < 0:
            raise ValueError(f"retry_max_delay must be >= 0, got {self.retry_max_delay}")
        if self.rate_limit_rps <= 0:
            raise ValueError(f"rate_limit_rps must be > 0, got {self.rate_limit_rps}")
        if self.timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be > 0, got {self.timeout_seconds}")

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        **overrides: Any,
    ) -> WordSyncConfig:
        """Build a config from environment variables.

        Explicit *overrides* win over the environment.  ``token`` and
        ``database_id`` are required; a :class:`ValueError` names the
        missing variable otherwise.
        """
        env = os.environ if environ is None else environ
        values: dict[str, Any] = {}
        for field_name, var in ENV_VARS.items():
            raw = env.get(var)
            if raw:
                values[field_name] = raw
        values.update(overrides)

        for required in ("token", "database_id"):
            if not values.get(required):
                raise ValueError(
                    f"{ENV_VARS[required]} is not set; it is required to run a sync"
                )
        return cls(**values)

    def __repr__(self) -> str:
        """Mask the token to prevent accidental credential leakage."""
        parts: list[str] = []
        for f in dataclasses.fields(self):
            val = getattr(self, f.name)
            if f.name == "token":
                masked = f"...{val[-4:]}" if len(val) >= 8 else "****"
                parts.append(f"token='{masked}'")
            else:
                parts.append(f"{f.name}={val!r}")
        return f"WordSyncConfig({', '.join(parts)})"
