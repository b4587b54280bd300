"""Page API wrapper for the Notion API.

:class:`AsyncPageAPI` is a thin wrapper around the ``/pages`` endpoints the
sync engine needs: reading a page (for its post-write ``last_edited_time``)
and updating its properties (to write the word count back).
"""

from __future__ import annotations

from typing import Any

from .transport import AsyncNotionTransport


class AsyncPageAPI:
    """Asynchronous wrapper for the Notion Pages API.

    Parameters
    ----------
    transport:
        A configured :class:`AsyncNotionTransport` instance.
    """

    def __init__(self, transport: AsyncNotionTransport) -> None:
        self._transport = transport

    async def retrieve(self, page_id: str) -> dict[str, Any]:
        """Retrieve a page object by its ID."""
        return await self._transport.request("GET", f"/pages/{page_id}")

    async def update(
        self,
        page_id: str,
        properties: dict[str, Any],
    ) -> dict[str, Any]:
        """Update a page's properties.

        Only the properties present in *properties* are changed.  Note that
        any successful update advances the page's ``last_edited_time``.

        Returns
        -------
        dict
            The updated page object.
        """
        return await self._transport.request(
            "PATCH", f"/pages/{page_id}", json={"properties": properties}
        )

    async def set_number_property(
        self,
        page_id: str,
        name: str,
        value: int | float | None,
    ) -> dict[str, Any]:
        """Set the *Number* property *name* on a page to *value*.

        The property must already exist on the parent database with the
        ``number`` type, otherwise Notion rejects the request with 400.
        """
        return await self.update(page_id, {name: {"number": value}})
