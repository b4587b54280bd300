"""Parsing and formatting of Notion ``last_edited_time`` values.

Notion returns ISO-8601 strings with a trailing ``Z``.  The sync engine
compares edit times chronologically, so everything is normalised to
timezone-aware UTC :class:`~datetime.datetime` objects.
"""

from __future__ import annotations

from datetime import datetime, timezone


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp into an aware UTC datetime.

    Naive values are assumed to be UTC.  Raises :class:`ValueError` for
    empty, non-string or malformed input.
    """
    if not isinstance(value, str):
        raise ValueError(f"timestamp must be a string, not {type(value).__name__}")
    if not value:
        raise ValueError("empty timestamp")
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def format_timestamp(value: datetime) -> str:
    """Render *value* as the ``...Z`` form Notion itself uses."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")
