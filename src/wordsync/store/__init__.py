"""Local persistence: the snapshot cache and the aggregate history log."""

from __future__ import annotations

from .base import HistoryStore, SnapshotStore
from .memory import InMemoryHistoryStore, InMemorySnapshotStore
from .sqlite import SqliteHistoryStore, SqliteSnapshotStore

__all__ = [
    "HistoryStore",
    "InMemoryHistoryStore",
    "InMemorySnapshotStore",
    "SnapshotStore",
    "SqliteHistoryStore",
    "SqliteSnapshotStore",
]
