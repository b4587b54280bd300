"""Incremental word-count synchronisation.

One run of :class:`SyncEngine`:

1. Page through the database query with its continuation cursor.
2. For each page, skip it when its snapshot's edit time is at or after the
   page's current ``last_edited_time``.
3. Otherwise count its words, write the count to the page, re-read the
   page for the edit time the write produced, and upsert the snapshot
   with that post-write time.
4. Once the listing is exhausted, append the sum of all snapshot counts to
   the history store.

Document-scoped failures (:class:`TraversalError`,
:class:`RemoteWriteError`, :class:`RemoteReadError`) are logged and leave
the page's snapshot untouched so that it is retried next run.  Everything
else, notably :class:`RemoteListingError` and :class:`StoreError`, aborts
the run and propagates.

Documents are processed strictly one at a time.  Overlapping runs against
the same stores are not guarded here; the caller must serialise them.
"""

from __future__ import annotations

import time
from collections.abc import AsyncIterator
from typing import Any, Protocol

from wordsync.config import WordSyncConfig
from wordsync.counting import WordCounter
from wordsync.errors import (
    RemoteListingError,
    RemoteReadError,
    RemoteWriteError,
    TraversalError,
    WordSyncError,
)
from wordsync.models import Document, ListPage, SyncPhase, SyncResult
from wordsync.observability import NoopMetricsHook, get_logger
from wordsync.store import HistoryStore, SnapshotStore

log = get_logger("wordsync.sync")

_DOCUMENT_ERRORS = (TraversalError, RemoteWriteError, RemoteReadError)


class DocumentSource(Protocol):
    """Lists one page of the documents in a collection."""

    async def query(
        self,
        database_id: str,
        start_cursor: str | None = None,
    ) -> ListPage: ...


class DocumentWriter(Protocol):
    """Reads a document and writes a numeric property to it."""

    async def retrieve(self, page_id: str) -> dict[str, Any]: ...

    async def set_number_property(
        self,
        page_id: str,
        name: str,
        value: int | float | None,
    ) -> dict[str, Any]: ...


class SyncEngine:
    """Orchestrates one incremental sync run at a time.

    Parameters
    ----------
    config:
        Supplies ``database_id``, ``word_count_property`` and ``metrics``.
    databases:
        Document listing, normally :class:`~wordsync.notion_api.AsyncDatabaseAPI`.
    pages:
        Document read/update, normally :class:`~wordsync.notion_api.AsyncPageAPI`.
    counter:
        Per-page :class:`~wordsync.counting.WordCounter`.
    snapshots, history:
        Opened stores; the engine never opens or closes them.
    """

    def __init__(
        self,
        config: WordSyncConfig,
        databases: DocumentSource,
        pages: DocumentWriter,
        counter: WordCounter,
        snapshots: SnapshotStore,
        history: HistoryStore,
    ) -> None:
        self._config = config
        self._databases = databases
        self._pages = pages
        self._counter = counter
        self._snapshots = snapshots
        self._history = history
        self._metrics = config.metrics if config.metrics is not None else NoopMetricsHook()
        self.phase = SyncPhase.IDLE

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def run(self) -> SyncResult:
        """Run one full sync.

        Returns
        -------
        SyncResult
            Aggregate counters for the run.

        Raises
        ------
        RemoteListingError
            The document listing could not be paged through.
        StoreError
            A snapshot or history operation failed.
        """
        result = SyncResult()
        t0 = time.monotonic()
        log.info(
            "Sync run started",
            extra={"extra_fields": {"op": "sync", "database_id": self._config.database_id}},
        )
        try:
            async for document in self._list_documents():
                result.documents_seen += 1
                await self._sync_document(document, result)

            self.phase = SyncPhase.AGGREGATING
            result.total_words = await self._snapshots.aggregate_word_count()
            await self._history.append(result.total_words)
        except BaseException as exc:
            self.phase = SyncPhase.FAILED
            log.error(
                "Sync run failed",
                extra={
                    "extra_fields": {
                        "op": "sync",
                        "database_id": self._config.database_id,
                        "error": repr(exc),
                        "documents_seen": result.documents_seen,
                    }
                },
            )
            raise

        self.phase = SyncPhase.DONE
        self._metrics.gauge("wordsync.total_words", result.total_words)
        self._metrics.timing("wordsync.sync_duration_ms", (time.monotonic() - t0) * 1000)
        log.info(
            "Sync run complete",
            extra={
                "extra_fields": {
                    "op": "sync",
                    "documents_seen": result.documents_seen,
                    "documents_skipped": result.documents_skipped,
                    "documents_reprocessed": result.documents_reprocessed,
                    "documents_failed": result.documents_failed,
                    "total_words": result.total_words,
                }
            },
        )
        return result

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------

    async def _list_documents(self) -> AsyncIterator[Document]:
        database_id = self._config.database_id
        cursor: str | None = None
        while True:
            self.phase = SyncPhase.LISTING
            try:
                page = await self._databases.query(database_id, start_cursor=cursor)
            except WordSyncError as exc:
                raise RemoteListingError(
                    message=f"Failed to list pages of database {database_id}: {exc.message}",
                    context={"database_id": database_id, "cursor": cursor},
                    cause=exc,
                ) from exc

            for raw in page.results:
                try:
                    document = Document.from_api(raw)
                except (KeyError, TypeError, ValueError) as exc:
                    raise RemoteListingError(
                        message=f"Malformed page in database {database_id}: {exc!r}",
                        context={"database_id": database_id, "cursor": cursor},
                        cause=exc,
                    ) from exc
                yield document

            cursor = page.continuation
            if cursor is None:
                break

    # ------------------------------------------------------------------
    # Per-document reconciliation
    # ------------------------------------------------------------------

    async def _sync_document(self, document: Document, result: SyncResult) -> None:
        stored = await self._snapshots.lookup(document.id)
        if stored is not None and stored >= document.last_edited_time:
            self.phase = SyncPhase.SKIP
            result.documents_skipped += 1
            self._metrics.increment("wordsync.documents_skipped_total")
            log.debug(
                "Already crawled",
                extra={"extra_fields": {"op": "sync_page", "page_id": document.id, "url": document.url}},
            )
            return

        self.phase = SyncPhase.REPROCESS
        try:
            word_count = await self._reprocess(document)
        except _DOCUMENT_ERRORS as exc:
            result.documents_failed += 1
            self._metrics.increment(
                "wordsync.documents_failed_total", tags={"code": exc.code},
            )
            log.warning(
                "Page sync failed; will retry next run",
                extra={
                    "extra_fields": {
                        "op": "sync_page",
                        "page_id": document.id,
                        "url": document.url,
                        "code": exc.code,
                        "error": exc.message,
                    }
                },
            )
            return

        result.documents_reprocessed += 1
        self._metrics.increment("wordsync.documents_reprocessed_total")
        log.info(
            "Word count updated",
            extra={
                "extra_fields": {
                    "op": "sync_page",
                    "page_id": document.id,
                    "url": document.url,
                    "word_count": word_count,
                }
            },
        )

    async def _reprocess(self, document: Document) -> int:
        """Count, write back, re-read, and snapshot one page."""
        word_count = await self._counter.count_document(document.id)

        prop = self._config.word_count_property
        try:
            await self._pages.set_number_property(document.id, prop, word_count)
        except WordSyncError as exc:
            raise RemoteWriteError(
                message=f"Failed to write '{prop}' on page {document.id}: {exc.message}",
                context={"page_id": document.id, "property": prop},
                cause=exc,
            ) from exc

        # The write itself bumps last_edited_time; snapshotting the
        # pre-write value would make every run reprocess the page.
        try:
            refreshed = Document.from_api(await self._pages.retrieve(document.id))
        except WordSyncError as exc:
            raise RemoteReadError(
                message=f"Failed to re-read page {document.id}: {exc.message}",
                context={"page_id": document.id},
                cause=exc,
            ) from exc
        except (KeyError, TypeError, ValueError) as exc:
            raise RemoteReadError(
                message=f"Malformed page {document.id} on re-read: {exc!r}",
                context={"page_id": document.id},
                cause=exc,
            ) from exc

        await self._snapshots.upsert(document.id, refreshed.last_edited_time, word_count)
        return word_count
