"""In-memory stores satisfying the same contracts as the SQLite ones.

Nothing is persisted.  Used to drive the sync engine in tests and dry
runs without touching the filesystem.
"""

from __future__ import annotations

from datetime import datetime, timezone

from wordsync.models import HistoryEntry, SnapshotRecord


class InMemorySnapshotStore:
    """Dict-backed snapshot store."""

    def __init__(self) -> None:
        self._records: dict[str, SnapshotRecord] = {}

    async def open(self) -> None:
        pass

    async def close(self) -> None:
        pass

    async def lookup(self, page_id: str) -> datetime | None:
        record = self._records.get(page_id)
        return record.last_edited_time if record is not None else None

    async def upsert(
        self,
        page_id: str,
        last_edited_time: datetime,
        word_count: int,
    ) -> None:
        self._records[page_id] = SnapshotRecord(
            id=page_id,
            last_edited_time=last_edited_time,
            word_count=word_count,
        )

    async def aggregate_word_count(self) -> int:
        return sum(record.word_count for record in self._records.values())

    async def get(self, page_id: str) -> SnapshotRecord | None:
        return self._records.get(page_id)

    async def records(self) -> list[SnapshotRecord]:
        return [self._records[key] for key in sorted(self._records)]


class InMemoryHistoryStore:
    """List-backed history store."""

    def __init__(self) -> None:
        self._entries: list[HistoryEntry] = []

    async def open(self) -> None:
        pass

    async def close(self) -> None:
        pass

    async def append(self, total_words: int) -> None:
        self._entries.append(
            HistoryEntry(timestamp=datetime.now(timezone.utc), total_words=total_words)
        )

    async def latest(self) -> HistoryEntry | None:
        return self._entries[-1] if self._entries else None

    async def entries(self) -> list[HistoryEntry]:
        return list(self._entries)
