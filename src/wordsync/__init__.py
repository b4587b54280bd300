"""wordsync: incremental word-count sync for a Notion database.

Public re-exports
-----------------

* **Client:** :class:`AsyncWordSyncClient`
* **Engine:** :class:`SyncEngine`, :class:`WordCounter`, :class:`BlockTreeWalker`
* **Counting:** :func:`count_words`, :func:`extract_text`
* **Stores:** SQLite and in-memory snapshot / history stores
* **Configuration:** :class:`WordSyncConfig`
* **Errors:** Every :class:`WordSyncError` subclass and :class:`ErrorCode`
* **Models:** Documents, blocks, records and run results

Usage::

    import asyncio
    from wordsync import AsyncWordSyncClient

    async def main():
        async with AsyncWordSyncClient(token="secret_xxx", database_id="<db>") as client:
            result = await client.run_sync()

    asyncio.run(main())
"""

from __future__ import annotations

# ── Client ─────────────────────────────────────────────────────────────
from wordsync.client import AsyncWordSyncClient

# ── Configuration ───────────────────────────────────────────────────────
from wordsync.config import DEFAULT_WORD_COUNT_PROPERTY, WordSyncConfig

# ── Counting ────────────────────────────────────────────────────────────
from wordsync.counting import (
    BlockTreeWalker,
    WordCounter,
    count_words,
    extract_text,
)

# ── Errors ──────────────────────────────────────────────────────────────
from wordsync.errors import (
    ErrorCode,
    RemoteListingError,
    RemoteReadError,
    RemoteWriteError,
    StoreError,
    TraversalError,
    WordSyncAuthError,
    WordSyncError,
    WordSyncNetworkError,
    WordSyncNotFoundError,
    WordSyncPermissionError,
    WordSyncRetryExhaustedError,
    WordSyncValidationError,
)

# ── Models ──────────────────────────────────────────────────────────────
from wordsync.models import (
    Block,
    Document,
    HistoryEntry,
    ListPage,
    SnapshotRecord,
    SyncPhase,
    SyncResult,
)

# ── Stores ──────────────────────────────────────────────────────────────
from wordsync.store import (
    HistoryStore,
    InMemoryHistoryStore,
    InMemorySnapshotStore,
    SnapshotStore,
    SqliteHistoryStore,
    SqliteSnapshotStore,
)

# ── Engine ──────────────────────────────────────────────────────────────
from wordsync.sync import SyncEngine

__version__ = "0.1.0"

__all__ = [
    # Client
    "AsyncWordSyncClient",
    # Configuration
    "WordSyncConfig",
    "DEFAULT_WORD_COUNT_PROPERTY",
    # Engine and counting
    "SyncEngine",
    "WordCounter",
    "BlockTreeWalker",
    "count_words",
    "extract_text",
    # Stores
    "SnapshotStore",
    "HistoryStore",
    "SqliteSnapshotStore",
    "SqliteHistoryStore",
    "InMemorySnapshotStore",
    "InMemoryHistoryStore",
    # Error base + code enum
    "WordSyncError",
    "ErrorCode",
    # API / transport errors
    "WordSyncValidationError",
    "WordSyncAuthError",
    "WordSyncPermissionError",
    "WordSyncNotFoundError",
    "WordSyncRetryExhaustedError",
    "WordSyncNetworkError",
    # Sync errors
    "RemoteListingError",
    "RemoteWriteError",
    "RemoteReadError",
    "TraversalError",
    "StoreError",
    # Models
    "Document",
    "Block",
    "ListPage",
    "SnapshotRecord",
    "HistoryEntry",
    "SyncPhase",
    "SyncResult",
]
