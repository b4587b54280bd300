"""Store contracts consumed by the sync engine.

Both stores are owned, injected dependencies: the caller opens them before
a run and closes them afterwards (or uses them as async context managers).
Any persistence failure surfaces as :class:`~wordsync.errors.StoreError`.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol, runtime_checkable


@runtime_checkable
class SnapshotStore(Protocol):
    """Keyed cache of ``page id -> (last_edited_time, word_count)``."""

    async def lookup(self, page_id: str) -> datetime | None:
        """Return the stored edit time of *page_id*, or ``None`` if unseen."""
        ...

    async def upsert(
        self,
        page_id: str,
        last_edited_time: datetime,
        word_count: int,
    ) -> None:
        """Insert a record, or replace both fields of an existing one."""
        ...

    async def aggregate_word_count(self) -> int:
        """Sum of ``word_count`` over all records (``0`` when empty)."""
        ...


@runtime_checkable
class HistoryStore(Protocol):
    """Append-only log of ``(timestamp, total_words)`` points."""

    async def append(self, total_words: int) -> None:
        """Append one entry; the store assigns its timestamp."""
        ...
