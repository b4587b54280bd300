"""Tests for counting/extractor.py"""

from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from wordsync.counting.extractor import (
    HAS_CHILDREN_SUFFIX,
    MEDIA_MARKER,
    UNSUPPORTED_MARKER,
    extract_text,
    rich_text_to_plain,
)
from wordsync.models import Block


def _block(block_type: str, payload: dict | None = None, has_children: bool = False) -> Block:
    return Block.from_api({
        "id": "blk-1",
        "type": block_type,
        "has_children": has_children,
        block_type: payload if payload is not None else {},
    })


def _spans(*texts: str) -> list[dict]:
    return [{"type": "text", "plain_text": t} for t in texts]


class TestRichText:
    def test_spans_joined_without_separator(self):
        blk = _block("paragraph", {"rich_text": _spans("Hello ", "wor", "ld")})
        assert extract_text(blk) == "Hello world"

    @pytest.mark.parametrize(
        "block_type",
        ["paragraph", "heading_1", "heading_2", "heading_3", "quote", "callout",
         "toggle", "to_do", "bulleted_list_item", "numbered_list_item", "code"],
    )
    def test_any_type_with_rich_text(self, block_type):
        blk = _block(block_type, {"rich_text": _spans("one two")})
        assert extract_text(blk) == "one two"

    def test_empty_rich_text_is_empty_string_not_unsupported(self):
        blk = _block("paragraph", {"rich_text": []})
        assert extract_text(blk) == ""

    def test_rich_text_wins_over_type_dispatch(self):
        blk = _block("equation", {"expression": "x^2", "rich_text": _spans("caption")})
        assert extract_text(blk) == "caption"

    def test_span_without_plain_text(self):
        assert rich_text_to_plain([{"type": "mention"}, {"plain_text": "ok"}]) == "ok"


class TestTypeDispatch:
    def test_bookmark_url(self):
        blk = _block("bookmark", {"url": "https://example.com/a", "caption": []})
        assert extract_text(blk) == "https://example.com/a"

    def test_link_preview_url(self):
        blk = _block("link_preview", {"url": "https://github.com/x/y"})
        assert extract_text(blk) == "https://github.com/x/y"

    def test_child_page_marker(self):
        blk = _block("child_page", {"title": "Chapter One"})
        assert extract_text(blk) == "[Sub-page: Chapter One]"

    @pytest.mark.parametrize("block_type", ["embed", "video", "file", "image", "pdf"])
    def test_media_marker(self, block_type):
        blk = _block(block_type, {"type": "external", "external": {"url": "https://x"}})
        assert extract_text(blk) == MEDIA_MARKER

    def test_equation_expression(self):
        blk = _block("equation", {"expression": "E = mc^2"})
        assert extract_text(blk) == "E = mc^2"

    @pytest.mark.parametrize(
        "block_type",
        ["divider", "table_of_contents", "breadcrumb", "audio", "child_database",
         "column_list", "synced_block", "brand_new_type"],
    )
    def test_unsupported_marker(self, block_type):
        assert extract_text(_block(block_type)) == UNSUPPORTED_MARKER

    def test_missing_payload_is_unsupported(self):
        blk = Block.from_api({"id": "b", "type": "divider", "has_children": False})
        assert extract_text(blk) == UNSUPPORTED_MARKER


class TestHasChildrenSuffix:
    def test_suffix_on_rich_text(self):
        blk = _block("toggle", {"rich_text": _spans("Details")}, has_children=True)
        assert extract_text(blk) == "Details (Has children)"

    def test_suffix_on_empty_rich_text(self):
        blk = _block("column", {"rich_text": []}, has_children=True)
        assert extract_text(blk) == HAS_CHILDREN_SUFFIX

    def test_suffix_on_dispatched_type(self):
        blk = _block("child_page", {"title": "Notes"}, has_children=True)
        assert extract_text(blk) == "[Sub-page: Notes] (Has children)"

    @given(
        block_type=st.text(alphabet="abcdefghijklmnopqrstuvwxyz_", min_size=1, max_size=20).filter(
            lambda t: t not in {"bookmark", "link_preview", "child_page", "equation",
                                "embed", "video", "file", "image", "pdf",
                                "id", "type", "has_children"}
        ),
        has_children=st.booleans(),
    )
    def test_unknown_type_marker_and_suffix_iff_children(self, block_type, has_children):
        text = extract_text(_block(block_type, has_children=has_children))
        expected = UNSUPPORTED_MARKER + (HAS_CHILDREN_SUFFIX if has_children else "")
        assert text == expected
