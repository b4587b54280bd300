"""SQLite implementations of the snapshot and history stores.

Each store owns one database file and one :mod:`aiosqlite` connection.
The schema is created on :meth:`open` if missing:

* snapshot file (default ``notion.db``)::

    pages(id TEXT PRIMARY KEY, last_edited_time DATETIME, word_count INTEGER)

* history file (default ``wordcount.db``)::

    word_count_history(timestamp DATETIME DEFAULT CURRENT_TIMESTAMP,
                       total_words INTEGER)

Edit times are stored as ISO-8601 UTC strings.
"""

from __future__ import annotations

import sqlite3
from collections.abc import AsyncIterator, Iterable
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import aiosqlite

from wordsync.errors import StoreError
from wordsync.models import HistoryEntry, SnapshotRecord
from wordsync.observability import get_logger
from wordsync.utils.timestamps import format_timestamp, parse_timestamp

log = get_logger("wordsync.store")

_PAGES_SCHEMA = """
CREATE TABLE IF NOT EXISTS pages (
    id TEXT PRIMARY KEY,
    last_edited_time DATETIME,
    word_count INTEGER
)
"""

_HISTORY_SCHEMA = """
CREATE TABLE IF NOT EXISTS word_count_history (
    timestamp DATETIME DEFAULT CURRENT_TIMESTAMP,
    total_words INTEGER
)
"""


class _SqliteStore:
    """Connection lifecycle shared by both stores."""

    _name = "sqlite"
    _schema = ""

    def __init__(self, path: str | Path) -> None:
        self.path = str(path)
        self._conn: aiosqlite.Connection | None = None

    async def open(self) -> None:
        """Open the database file and create the schema if needed."""
        if self._conn is not None:
            return
        if self.path != ":memory:":
            Path(self.path).parent.mkdir(parents=True, exist_ok=True)
        try:
            self._conn = await aiosqlite.connect(self.path)
            await self._conn.execute(self._schema)
            await self._conn.commit()
        except sqlite3.Error as exc:
            await self._discard_connection()
            raise self._error("open", exc) from exc
        log.debug(
            "Store opened",
            extra={"extra_fields": {"store": self._name, "path": self.path}},
        )

    async def close(self) -> None:
        """Close the connection.  Safe to call more than once."""
        if self._conn is None:
            return
        conn, self._conn = self._conn, None
        await conn.close()

    async def __aenter__(self) -> Any:
        await self.open()
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    @asynccontextmanager
    async def _write(self, operation: str) -> AsyncIterator[aiosqlite.Connection]:
        """Yield the connection and commit, rolling back on failure."""
        conn = self._connection(operation)
        try:
            yield conn
            await conn.commit()
        except sqlite3.Error as exc:
            await conn.rollback()
            raise self._error(operation, exc) from exc

    async def _fetchone(
        self, operation: str, sql: str, params: Iterable[Any] = (),
    ) -> Any:
        conn = self._connection(operation)
        try:
            async with conn.execute(sql, tuple(params)) as cursor:
                return await cursor.fetchone()
        except sqlite3.Error as exc:
            raise self._error(operation, exc) from exc

    async def _fetchall(
        self, operation: str, sql: str, params: Iterable[Any] = (),
    ) -> list[Any]:
        conn = self._connection(operation)
        try:
            async with conn.execute(sql, tuple(params)) as cursor:
                return list(await cursor.fetchall())
        except sqlite3.Error as exc:
            raise self._error(operation, exc) from exc

    def _connection(self, operation: str) -> aiosqlite.Connection:
        if self._conn is None:
            raise StoreError(
                message=f"{self._name} store is not open ({operation})",
                context={"store": self._name, "operation": operation, "path": self.path},
            )
        return self._conn

    def _error(self, operation: str, exc: Exception) -> StoreError:
        return StoreError(
            message=f"{self._name} store {operation} failed: {exc}",
            context={"store": self._name, "operation": operation, "path": self.path},
            cause=exc,
        )

    async def _discard_connection(self) -> None:
        if self._conn is not None:
            conn, self._conn = self._conn, None
            await conn.close()


class SqliteSnapshotStore(_SqliteStore):
    """Snapshot store backed by the ``pages`` table."""

    _name = "snapshot"
    _schema = _PAGES_SCHEMA

    async def lookup(self, page_id: str) -> datetime | None:
        row = await self._fetchone(
            "lookup",
            "SELECT last_edited_time FROM pages WHERE id = ?",
            (page_id,),
        )
        if row is None or row[0] is None:
            return None
        return parse_timestamp(row[0])

    async def upsert(
        self,
        page_id: str,
        last_edited_time: datetime,
        word_count: int,
    ) -> None:
        async with self._write("upsert") as conn:
            await conn.execute(
                """
                INSERT INTO pages (id, last_edited_time, word_count)
                VALUES (?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    last_edited_time = excluded.last_edited_time,
                    word_count = excluded.word_count
                """,
                (page_id, format_timestamp(last_edited_time), word_count),
            )

    async def aggregate_word_count(self) -> int:
        row = await self._fetchone(
            "aggregate", "SELECT COALESCE(SUM(word_count), 0) FROM pages",
        )
        return int(row[0]) if row is not None else 0

    async def get(self, page_id: str) -> SnapshotRecord | None:
        """Return the full record for *page_id*, or ``None``."""
        row = await self._fetchone(
            "get",
            "SELECT id, last_edited_time, word_count FROM pages WHERE id = ?",
            (page_id,),
        )
        if row is None:
            return None
        return SnapshotRecord(
            id=row[0],
            last_edited_time=parse_timestamp(row[1]),
            word_count=row[2],
        )

    async def records(self) -> list[SnapshotRecord]:
        """Return every record, ordered by page id."""
        rows = await self._fetchall(
            "records",
            "SELECT id, last_edited_time, word_count FROM pages ORDER BY id",
        )
        return [
            SnapshotRecord(
                id=row[0],
                last_edited_time=parse_timestamp(row[1]),
                word_count=row[2],
            )
            for row in rows
        ]


class SqliteHistoryStore(_SqliteStore):
    """History store backed by the ``word_count_history`` table."""

    _name = "history"
    _schema = _HISTORY_SCHEMA

    async def append(self, total_words: int) -> None:
        async with self._write("append") as conn:
            await conn.execute(
                "INSERT INTO word_count_history (total_words) VALUES (?)",
                (total_words,),
            )

    async def latest(self) -> HistoryEntry | None:
        """Return the most recently appended entry, or ``None``."""
        row = await self._fetchone(
            "latest",
            "SELECT timestamp, total_words FROM word_count_history "
            "ORDER BY rowid DESC LIMIT 1",
        )
        return _history_entry(row) if row is not None else None

    async def entries(self) -> list[HistoryEntry]:
        """Return all entries in insertion order."""
        rows = await self._fetchall(
            "entries",
            "SELECT timestamp, total_words FROM word_count_history ORDER BY rowid",
        )
        return [_history_entry(row) for row in rows]


def _history_entry(row: Any) -> HistoryEntry:
    # CURRENT_TIMESTAMP is "YYYY-MM-DD HH:MM:SS" in UTC.
    timestamp = datetime.fromisoformat(row[0]).replace(tzinfo=timezone.utc)
    return HistoryEntry(timestamp=timestamp, total_words=row[1])
