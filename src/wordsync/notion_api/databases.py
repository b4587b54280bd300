"""Database API wrapper for the Notion API."""

from __future__ import annotations

from typing import Any

from wordsync.models import ListPage

from .transport import AsyncNotionTransport


class AsyncDatabaseAPI:
    """Asynchronous wrapper for ``POST /databases/{id}/query``.

    Parameters
    ----------
    transport:
        A configured :class:`AsyncNotionTransport` instance.
    page_size:
        Number of pages requested per call (Notion caps it at 100).
    """

    def __init__(self, transport: AsyncNotionTransport, page_size: int = 100) -> None:
        self._transport = transport
        self._page_size = page_size

    async def query(
        self,
        database_id: str,
        start_cursor: str | None = None,
        filter: dict[str, Any] | None = None,
    ) -> ListPage:
        """Fetch one page of the database's pages.

        Parameters
        ----------
        database_id:
            The UUID of the database.
        start_cursor:
            ``next_cursor`` of the previous page, or ``None`` for the first.
        filter:
            Optional Notion filter object, passed through unchanged.
        """
        body: dict[str, Any] = {"page_size": self._page_size}
        if start_cursor is not None:
            body["start_cursor"] = start_cursor
        if filter is not None:
            body["filter"] = filter
        data = await self._transport.request(
            "POST", f"/databases/{database_id}/query", json=body
        )
        return ListPage.from_api(data)
