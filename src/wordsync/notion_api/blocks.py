"""Block API wrapper for the Notion API.

:class:`AsyncBlockAPI` exposes one page of ``GET /blocks/{id}/children``
at a time.  Cursor handling is left to the caller so that each level of a
recursive walk can keep its own continuation cursor.
"""

from __future__ import annotations

from wordsync.models import ListPage

from .transport import AsyncNotionTransport


class AsyncBlockAPI:
    """Asynchronous wrapper for the Notion Blocks API.

    Parameters
    ----------
    transport:
        A configured :class:`AsyncNotionTransport` instance.
    page_size:
        Number of children requested per call (Notion caps it at 100).
    """

    def __init__(self, transport: AsyncNotionTransport, page_size: int = 100) -> None:
        self._transport = transport
        self._page_size = page_size

    async def list_children(
        self,
        block_id: str,
        start_cursor: str | None = None,
    ) -> ListPage:
        """Fetch one page of the children of a block (or page).

        Parameters
        ----------
        block_id:
            The UUID of the parent block or page.
        start_cursor:
            ``next_cursor`` of the previous page, or ``None`` for the first.

        Returns
        -------
        ListPage
            Child block objects in listing order plus the continuation.
        """
        params: dict[str, str | int] = {"page_size": self._page_size}
        if start_cursor is not None:
            params["start_cursor"] = start_cursor
        data = await self._transport.request(
            "GET", f"/blocks/{block_id}/children", params=params
        )
        return ListPage.from_api(data)
