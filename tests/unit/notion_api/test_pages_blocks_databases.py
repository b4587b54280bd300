"""Unit tests for AsyncPageAPI, AsyncBlockAPI and AsyncDatabaseAPI.

All HTTP calls go through a transport mock.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

from wordsync.models import ListPage
from wordsync.notion_api import AsyncBlockAPI, AsyncDatabaseAPI, AsyncPageAPI


def make_transport(response: dict | None = None) -> MagicMock:
    t = MagicMock()
    t.request = AsyncMock(return_value=response if response is not None else {})
    return t


# ===========================================================================
# AsyncPageAPI
# ===========================================================================

class TestAsyncPageAPI:
    async def test_retrieve(self):
        t = make_transport({"id": "pg-1", "last_edited_time": "2024-05-01T09:00:00.000Z"})
        result = await AsyncPageAPI(t).retrieve("pg-1")
        t.request.assert_awaited_once_with("GET", "/pages/pg-1")
        assert result["id"] == "pg-1"

    async def test_update(self):
        t = make_transport({"id": "pg-1"})
        await AsyncPageAPI(t).update("pg-1", {"Status": {"select": {"name": "Done"}}})
        t.request.assert_awaited_once_with(
            "PATCH",
            "/pages/pg-1",
            json={"properties": {"Status": {"select": {"name": "Done"}}}},
        )

    async def test_set_number_property(self):
        t = make_transport({"id": "pg-1"})
        await AsyncPageAPI(t).set_number_property("pg-1", "Word Count", 812)
        t.request.assert_awaited_once_with(
            "PATCH",
            "/pages/pg-1",
            json={"properties": {"Word Count": {"number": 812}}},
        )

    async def test_set_number_property_clears_with_none(self):
        t = make_transport()
        await AsyncPageAPI(t).set_number_property("pg-1", "Word Count", None)
        assert t.request.call_args.kwargs["json"] == {
            "properties": {"Word Count": {"number": None}},
        }


# ===========================================================================
# AsyncBlockAPI
# ===========================================================================

class TestAsyncBlockAPI:
    async def test_first_page_has_no_cursor(self):
        t = make_transport({
            "results": [{"id": "b1"}, {"id": "b2"}],
            "next_cursor": "c-2",
            "has_more": True,
        })
        page = await AsyncBlockAPI(t).list_children("pg-1")
        t.request.assert_awaited_once_with(
            "GET", "/blocks/pg-1/children", params={"page_size": 100},
        )
        assert page == ListPage(
            results=[{"id": "b1"}, {"id": "b2"}], next_cursor="c-2", has_more=True,
        )
        assert page.continuation == "c-2"

    async def test_cursor_and_page_size_forwarded(self):
        t = make_transport({"results": [], "has_more": False})
        await AsyncBlockAPI(t, page_size=25).list_children("b1", start_cursor="c-9")
        t.request.assert_awaited_once_with(
            "GET",
            "/blocks/b1/children",
            params={"page_size": 25, "start_cursor": "c-9"},
        )

    async def test_last_page_has_no_continuation(self):
        t = make_transport({"results": [{"id": "b1"}], "next_cursor": None, "has_more": False})
        page = await AsyncBlockAPI(t).list_children("pg-1")
        assert page.continuation is None


# ===========================================================================
# AsyncDatabaseAPI
# ===========================================================================

class TestAsyncDatabaseAPI:
    async def test_query_first_page(self):
        t = make_transport({"results": [{"id": "pg-1"}], "has_more": False})
        page = await AsyncDatabaseAPI(t).query("db-1")
        t.request.assert_awaited_once_with(
            "POST", "/databases/db-1/query", json={"page_size": 100},
        )
        assert page.results == [{"id": "pg-1"}]

    async def test_query_with_cursor_and_filter(self):
        t = make_transport({"results": []})
        flt = {"property": "Status", "select": {"equals": "Draft"}}
        await AsyncDatabaseAPI(t, page_size=10).query("db-1", start_cursor="c-1", filter=flt)
        t.request.assert_awaited_once_with(
            "POST",
            "/databases/db-1/query",
            json={"page_size": 10, "start_cursor": "c-1", "filter": flt},
        )

    async def test_missing_keys_mean_exhausted(self):
        page = await AsyncDatabaseAPI(make_transport({})).query("db-1")
        assert page.results == []
        assert page.continuation is None
