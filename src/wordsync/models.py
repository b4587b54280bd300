"""Data models for wordsync.

Remote objects (:class:`Document`, :class:`Block`, :class:`ListPage`) are
thin typed views over the JSON the Notion API returns.  Local records
(:class:`SnapshotRecord`, :class:`HistoryEntry`) mirror the rows of the
two SQLite stores.  :class:`SyncResult` and :class:`SyncPhase` describe a
sync run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from wordsync.utils.timestamps import parse_timestamp

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class SyncPhase(str, Enum):
    """States of the sync engine during one run."""

    IDLE = "idle"
    """No run has started yet."""

    LISTING = "listing"
    """Fetching the next page of the document listing."""

    SKIP = "skip"
    """The current document is unchanged since its snapshot."""

    REPROCESS = "reprocess"
    """The current document is being counted and written back."""

    AGGREGATING = "aggregating"
    """Listing exhausted; the aggregate is being appended to history."""

    DONE = "done"
    """The run completed."""

    FAILED = "failed"
    """A run-scoped error aborted the run."""


# ---------------------------------------------------------------------------
# Remote objects
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Document:
    """A Notion page in the synchronised database.

    Attributes
    ----------
    id:
        Page UUID.
    last_edited_time:
        Aware UTC datetime of the page's latest edit.
    url:
        Display URL, used in log messages.
    """

    id: str
    last_edited_time: datetime
    url: str = ""

    @classmethod
    def from_api(cls, page: dict[str, Any]) -> Document:
        """Build from a page object returned by ``GET /pages/{id}`` or a
        database query."""
        return cls(
            id=page["id"],
            last_edited_time=parse_timestamp(page["last_edited_time"]),
            url=page.get("url", ""),
        )


@dataclass(frozen=True)
class Block:
    """One node of a page's content tree.

    Attributes
    ----------
    id:
        Block UUID.
    type:
        Notion block type tag (``"paragraph"``, ``"bookmark"``, ...).
    has_children:
        Whether the block has child blocks that must be listed separately.
    payload:
        The type-specific object, i.e. ``block[block["type"]]``.
    """

    id: str
    type: str
    has_children: bool = False
    payload: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_api(cls, block: dict[str, Any]) -> Block:
        block_type = block.get("type", "")
        payload = block.get(block_type)
        return cls(
            id=block.get("id", ""),
            type=block_type,
            has_children=bool(block.get("has_children", False)),
            payload=payload if isinstance(payload, dict) else {},
        )


@dataclass
class ListPage:
    """One page of a paginated Notion listing.

    ``next_cursor`` is only meaningful when ``has_more`` is true.
    """

    results: list[dict[str, Any]] = field(default_factory=list)
    next_cursor: str | None = None
    has_more: bool = False

    @classmethod
    def from_api(cls, response: dict[str, Any]) -> ListPage:
        return cls(
            results=list(response.get("results", [])),
            next_cursor=response.get("next_cursor"),
            has_more=bool(response.get("has_more", False)),
        )

    @property
    def continuation(self) -> str | None:
        """Cursor for the next page, or ``None`` when the listing is exhausted."""
        if not self.has_more:
            return None
        return self.next_cursor


# ---------------------------------------------------------------------------
# Local records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SnapshotRecord:
    """The last known state of a page, as recorded by a successful sync.

    ``last_edited_time`` is the page's edit time read back *after* the
    word count was written to it.
    """

    id: str
    last_edited_time: datetime
    word_count: int


@dataclass(frozen=True)
class HistoryEntry:
    """One aggregate point appended at the end of a sync run."""

    timestamp: datetime
    total_words: int


# ---------------------------------------------------------------------------
# Run result
# ---------------------------------------------------------------------------

@dataclass
class SyncResult:
    """Summary of a completed sync run.

    Attributes
    ----------
    processed_ok:
        Always ``True`` on a returned result; failed runs raise instead.
    documents_seen:
        Pages returned by the database listing.
    documents_skipped:
        Pages whose snapshot was already current.
    documents_reprocessed:
        Pages counted, written back and re-snapshotted.
    documents_failed:
        Pages that hit a document-scoped error; retried next run.
    total_words:
        The aggregate appended to the history store.
    """

    processed_ok: bool = True
    documents_seen: int = 0
    documents_skipped: int = 0
    documents_reprocessed: int = 0
    documents_failed: int = 0
    total_words: int = 0
