"""Token / payload redaction for debug dumps.

Request and response bodies written by ``debug_dump_payload`` pass through
:func:`redact` first:

* values under sensitive keys (``authorization``, ``token``, ``secret`` ...)
  are replaced with ``<redacted>``;
* the integration token, wherever it appears inside a string, is replaced
  with ``<redacted:...XXXX>`` (last four characters only);
* any remaining ``Bearer <credential>`` fragment is masked.
"""

from __future__ import annotations

import re
from typing import Any

_SENSITIVE_KEY_PATTERNS: frozenset[str] = frozenset({
    "token",
    "secret",
    "password",
    "credential",
    "authorization",
    "cookie",
    "api_key",
    "api-key",
})

_BEARER_RE = re.compile(r"(Bearer\s+)\S+")


def _is_sensitive(key: str) -> bool:
    lowered = key.lower()
    return any(pattern in lowered for pattern in _SENSITIVE_KEY_PATTERNS)


def _mask_string(value: str, token: str | None) -> str:
    if token and token in value:
        suffix = token[-4:] if len(token) >= 8 else "****"
        value = value.replace(token, f"<redacted:...{suffix}>")
    return _BEARER_RE.sub(lambda m: f"{m.group(1)}<redacted>", value)


def _redact_value(value: Any, token: str | None) -> Any:
    if isinstance(value, dict):
        return {
            key: "<redacted>" if isinstance(key, str) and _is_sensitive(key)
            else _redact_value(item, token)
            for key, item in value.items()
        }
    if isinstance(value, list):
        return [_redact_value(item, token) for item in value]
    if isinstance(value, str):
        return _mask_string(value, token)
    return value


def redact(payload: dict, token: str | None = None) -> dict:
    """Return a copy of *payload* with credentials removed.

    The input is never mutated.

    >>> redact({"Authorization": "Bearer ntn_abc123"})
    {'Authorization': '<redacted>'}
    """
    return _redact_value(payload, token)
