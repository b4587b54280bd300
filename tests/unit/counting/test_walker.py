"""Tests for counting/walker.py

Traversal order, per-level pagination cursors, laziness, and failure
wrapping.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
from fakes import FakeWorkspace, para

from wordsync.counting.walker import BlockTreeWalker
from wordsync.errors import TraversalError, WordSyncNetworkError, WordSyncValidationError
from wordsync.models import ListPage


async def _ids(walker: BlockTreeWalker, root: str) -> list[str]:
    return [b.id async for b in walker.walk(root)]


class TestTraversalOrder:
    async def test_parent_before_child_before_sibling(self, workspace):
        workspace.add_page("page", [para("A", "a", children=[para("B", "b")]), para("C", "c")])
        assert await _ids(BlockTreeWalker(workspace), "page") == ["A", "B", "C"]

    async def test_deep_nesting_is_preorder(self, workspace):
        workspace.add_page("page", [
            para("A", "a", children=[
                para("A1", "a1", children=[para("A1x", "x")]),
                para("A2", "a2"),
            ]),
            para("B", "b", children=[para("B1", "b1")]),
            para("C", "c"),
        ])
        assert await _ids(BlockTreeWalker(workspace), "page") == [
            "A", "A1", "A1x", "A2", "B", "B1", "C",
        ]

    async def test_empty_page(self, workspace):
        workspace.add_page("page", [])
        assert await _ids(BlockTreeWalker(workspace), "page") == []

    async def test_leaf_blocks_are_not_listed(self, workspace):
        workspace.add_page("page", [para("A", "a"), para("B", "b")])
        await _ids(BlockTreeWalker(workspace), "page")
        assert [c[1] for c in workspace.calls_of("list_children")] == ["page"]


class TestPagination:
    async def test_each_level_keeps_its_own_cursor(self):
        ws = FakeWorkspace(page_size=2)
        ws.add_page("page", [
            para("A", "a", children=[para("A1", "1"), para("A2", "2"), para("A3", "3")]),
            para("B", "b"),
            para("C", "c"),
        ])
        ids = await _ids(BlockTreeWalker(ws), "page")
        assert ids == ["A", "A1", "A2", "A3", "B", "C"]
        assert ws.calls_of("list_children") == [
            ("list_children", "page", None),
            ("list_children", "A", None),
            ("list_children", "A", "2"),
            ("list_children", "page", "2"),
        ]

    async def test_stops_when_has_more_false(self):
        source = MagicMock()
        source.list_children = AsyncMock(return_value=ListPage(
            results=[{"id": "x", "type": "divider", "has_children": False, "divider": {}}],
            next_cursor="ignored",
            has_more=False,
        ))
        ids = await _ids(BlockTreeWalker(source), "page")
        assert ids == ["x"]
        source.list_children.assert_awaited_once_with("page", start_cursor=None)

    async def test_stops_when_cursor_missing(self):
        source = MagicMock()
        source.list_children = AsyncMock(return_value=ListPage(results=[], has_more=True))
        assert await _ids(BlockTreeWalker(source), "page") == []
        source.list_children.assert_awaited_once()


class TestLaziness:
    async def test_children_fetched_only_after_parent_is_consumed(self, workspace):
        workspace.add_page("page", [para("A", "a", children=[para("B", "b")])])
        walk = BlockTreeWalker(workspace).walk("page")
        first = await walk.__anext__()
        assert first.id == "A"
        assert [c[1] for c in workspace.calls_of("list_children")] == ["page"]
        second = await walk.__anext__()
        assert second.id == "B"
        assert [c[1] for c in workspace.calls_of("list_children")] == ["page", "A"]
        await walk.aclose()


class TestFailures:
    async def test_listing_error_becomes_traversal_error(self, workspace):
        workspace.add_page("page", [para("A", "a")])
        workspace.fail_children_for.add("page")
        with pytest.raises(TraversalError) as exc_info:
            await _ids(BlockTreeWalker(workspace), "page")
        err = exc_info.value
        assert err.context["block_id"] == "page"
        assert isinstance(err.cause, WordSyncNetworkError)
        assert err.__cause__ is err.cause

    async def test_nested_failure_names_the_failing_block(self, workspace):
        workspace.add_page("page", [para("A", "a", children=[para("B", "b")]), para("C", "c")])
        workspace.fail_children_for.add("A")
        seen: list[str] = []
        with pytest.raises(TraversalError) as exc_info:
            async for blk in BlockTreeWalker(workspace).walk("page"):
                seen.append(blk.id)
        assert exc_info.value.context["block_id"] == "A"
        assert seen == ["A"]

    async def test_malformed_listing_body_becomes_traversal_error(self):
        source = MagicMock()
        source.list_children = AsyncMock(side_effect=WordSyncValidationError(
            "Malformed response body on GET /blocks/page/children",
            context={"status_code": 200, "body": "<html>"},
        ))
        with pytest.raises(TraversalError) as exc_info:
            await _ids(BlockTreeWalker(source), "page")
        assert isinstance(exc_info.value.cause, WordSyncValidationError)


class TestMetrics:
    async def test_blocks_visited_counter(self, workspace):
        workspace.add_page("page", [para("A", "a", children=[para("B", "b")]), para("C", "c")])
        metrics = MagicMock()
        await _ids(BlockTreeWalker(workspace, metrics=metrics), "page")
        assert metrics.increment.call_count == 3
        metrics.increment.assert_called_with("wordsync.blocks_visited_total")


class TestDeepNesting:
    async def test_deeply_nested_chain(self, workspace):
        depth = 60
        node = para(f"n{depth - 1}", "leaf")
        for level in range(depth - 2, -1, -1):
            node = para(f"n{level}", "x", children=[node])
        workspace.add_page("page", [node])

        ids = await _ids(BlockTreeWalker(workspace), "page")

        assert ids == [f"n{level}" for level in range(depth)]
