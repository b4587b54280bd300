"""Incremental sync orchestration."""

from __future__ import annotations

from .engine import DocumentSource, DocumentWriter, SyncEngine

__all__ = [
    "DocumentSource",
    "DocumentWriter",
    "SyncEngine",
]
