"""Asynchronous wordsync client.

:class:`AsyncWordSyncClient` wires the transport, API wrappers, counter,
stores and engine together and owns their lifecycle.  It is the surface a
trigger (CLI, scheduler, HTTP handler) calls.

Usage::

    import asyncio
    from wordsync import AsyncWordSyncClient

    async def main():
        async with AsyncWordSyncClient(token="secret_xxx", database_id="<db>") as client:
            result = await client.run_sync()
            print(result.total_words)

    asyncio.run(main())
"""

from __future__ import annotations

import asyncio
from typing import Any

from wordsync.config import WordSyncConfig
from wordsync.counting import BlockTreeWalker, WordCounter
from wordsync.models import SyncResult
from wordsync.notion_api.blocks import AsyncBlockAPI
from wordsync.notion_api.databases import AsyncDatabaseAPI
from wordsync.notion_api.pages import AsyncPageAPI
from wordsync.notion_api.transport import AsyncNotionTransport
from wordsync.store import SqliteHistoryStore, SqliteSnapshotStore
from wordsync.sync import SyncEngine


class AsyncWordSyncClient:
    """Asynchronous wordsync client.

    Parameters
    ----------
    token:
        Notion integration token.
    database_id:
        The database whose pages are synchronised.
    config:
        A prebuilt :class:`WordSyncConfig`; when given, *token*,
        *database_id* and *kwargs* are ignored.
    snapshots, history:
        Store overrides.  Default to the SQLite stores at the configured
        paths.  Whatever is passed is opened and closed by the client.
    **kwargs:
        Forwarded to :class:`WordSyncConfig`.
    """

    def __init__(
        self,
        token: str = "",
        database_id: str = "",
        *,
        config: WordSyncConfig | None = None,
        snapshots: Any | None = None,
        history: Any | None = None,
        **kwargs: Any,
    ) -> None:
        self._config = config or WordSyncConfig(token=token, database_id=database_id, **kwargs)
        self._transport = AsyncNotionTransport(self._config)
        self._pages = AsyncPageAPI(self._transport)
        self._blocks = AsyncBlockAPI(self._transport, page_size=self._config.page_size)
        self._databases = AsyncDatabaseAPI(self._transport, page_size=self._config.page_size)
        self._snapshots = (
            snapshots if snapshots is not None
            else SqliteSnapshotStore(self._config.snapshot_db_path)
        )
        self._history = (
            history if history is not None
            else SqliteHistoryStore(self._config.history_db_path)
        )
        self._counter = WordCounter(BlockTreeWalker(self._blocks, metrics=self._config.metrics))
        self._engine = SyncEngine(
            self._config,
            databases=self._databases,
            pages=self._pages,
            counter=self._counter,
            snapshots=self._snapshots,
            history=self._history,
        )
        self._run_lock = asyncio.Lock()

    @property
    def config(self) -> WordSyncConfig:
        return self._config

    @property
    def engine(self) -> SyncEngine:
        return self._engine

    # ------------------------------------------------------------------
    # Sync
    # ------------------------------------------------------------------

    async def run_sync(self) -> SyncResult:
        """Run one incremental sync.

        Overlapping calls on the same client wait for each other, so the
        stores are never driven by two runs at once.

        Raises
        ------
        RemoteListingError, StoreError
            The run failed; no partial detail is returned.
        """
        async with self._run_lock:
            return await self._engine.run()

    async def count_page(self, page_id: str) -> int:
        """Count the words of one page without touching any store."""
        return await self._counter.count_document(page_id)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def open(self) -> None:
        """Open both stores."""
        await self._snapshots.open()
        try:
            await self._history.open()
        except BaseException:
            await self._snapshots.close()
            raise

    async def close(self) -> None:
        """Close the stores and the HTTP client."""
        try:
            try:
                await self._history.close()
            finally:
                await self._snapshots.close()
        finally:
            await self._transport.close()

    async def __aenter__(self) -> AsyncWordSyncClient:
        await self.open()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()
