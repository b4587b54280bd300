"""Tests for utils/redact.py"""

from __future__ import annotations

import copy

from hypothesis import given
from hypothesis import strategies as st

from wordsync.utils import redact

TOKEN = "secret_abcdefgh1234"


class TestRedact:
    def test_sensitive_keys_replaced(self):
        result = redact({"Authorization": "Bearer x", "api_key": "k", "page_size": 100})
        assert result == {"Authorization": "<redacted>", "api_key": "<redacted>", "page_size": 100}

    def test_key_match_is_case_insensitive_substring(self):
        assert redact({"X-Notion-Token": "t"}) == {"X-Notion-Token": "<redacted>"}

    def test_token_inside_string_is_masked_to_last_four(self):
        result = redact({"url": f"https://example.com/?t={TOKEN}"}, token=TOKEN)
        assert result["url"] == "https://example.com/?t=<redacted:...1234>"

    def test_short_token_fully_masked(self):
        result = redact({"note": "abc12"}, token="abc12")
        assert result["note"] == "<redacted:...****>"

    def test_bearer_fragment_masked_without_token(self):
        result = redact({"echo": "header was Bearer ntn_xyz"})
        assert result["echo"] == "header was Bearer <redacted>"

    def test_nested_structures(self):
        payload = {"results": [{"properties": {"secret_note": "x"}}, {"text": TOKEN}]}
        result = redact(payload, token=TOKEN)
        assert result["results"][0]["properties"]["secret_note"] == "<redacted>"
        assert TOKEN not in str(result)

    def test_non_string_values_untouched(self):
        payload = {"number": 812, "flag": True, "nothing": None}
        assert redact(payload, token=TOKEN) == payload

    def test_input_not_mutated(self):
        payload = {"authorization": "Bearer x", "body": {"t": TOKEN}}
        original = copy.deepcopy(payload)
        redact(payload, token=TOKEN)
        assert payload == original

    @given(st.text(min_size=0, max_size=40))
    def test_token_never_survives(self, prefix):
        result = redact({"body": f"{prefix}{TOKEN}{prefix}"}, token=TOKEN)
        assert TOKEN not in result["body"]
