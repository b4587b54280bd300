"""Lazy depth-first traversal of a page's block tree.

Notion does not embed children in their parent: every block with
``has_children`` needs its own paginated ``GET /blocks/{id}/children``
call.  :class:`BlockTreeWalker` turns that into a single async iterator in
pre-order (a parent before its descendants, a block's whole subtree before
its next sibling) without materialising the tree.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any, Protocol

from wordsync.errors import TraversalError, WordSyncError
from wordsync.models import Block, ListPage


class BlockChildrenSource(Protocol):
    """Anything that can list one page of a block's children."""

    async def list_children(
        self,
        block_id: str,
        start_cursor: str | None = None,
    ) -> ListPage: ...


class BlockTreeWalker:
    """Enumerate every block under a page or block.

    Parameters
    ----------
    blocks:
        A :class:`BlockChildrenSource`, normally
        :class:`~wordsync.notion_api.AsyncBlockAPI`.
    metrics:
        Optional metrics hook; ``wordsync.blocks_visited_total`` is
        incremented once per yielded block.
    """

    def __init__(self, blocks: BlockChildrenSource, metrics: Any | None = None) -> None:
        self._blocks = blocks
        self._metrics = metrics

    async def walk(self, root_id: str) -> AsyncIterator[Block]:
        """Yield every descendant of *root_id* in depth-first pre-order.

        Each recursion level owns its continuation cursor.

        Raises
        ------
        TraversalError
            If any listing call fails.  Blocks already yielded are not
            retracted; callers must discard the partial walk.
        """
        cursor: str | None = None
        while True:
            try:
                page = await self._blocks.list_children(root_id, start_cursor=cursor)
            except WordSyncError as exc:
                raise TraversalError(
                    message=f"Failed to list children of block {root_id}: {exc.message}",
                    context={"block_id": root_id, "cursor": cursor},
                    cause=exc,
                ) from exc

            for raw in page.results:
                block = Block.from_api(raw)
                if self._metrics is not None:
                    self._metrics.increment("wordsync.blocks_visited_total")
                yield block
                if block.has_children:
                    async for descendant in self.walk(block.id):
                        yield descendant

            cursor = page.continuation
            if cursor is None:
                break
