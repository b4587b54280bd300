"""Tests for config.py: validation, environment loading, and repr masking."""

from __future__ import annotations

import pytest

from wordsync.config import DEFAULT_WORD_COUNT_PROPERTY, ENV_VARS, WordSyncConfig

ENV = {"NOTION_API_KEY": "secret_token_abcd", "NOTION_DATABASE_ID": "db-env"}


class TestDefaults:
    def test_defaults(self):
        config = WordSyncConfig(token="t", database_id="d")
        assert config.notion_version == "2022-06-28"
        assert config.word_count_property == DEFAULT_WORD_COUNT_PROPERTY == "Word Count"
        assert config.snapshot_db_path == "notion.db"
        assert config.history_db_path == "wordcount.db"
        assert config.page_size == 100
        assert config.metrics is None


class TestValidation:
    @pytest.mark.parametrize(
        ("overrides", "match"),
        [
            ({"base_url": "http://api.notion.com/v1"}, "insecure HTTP"),
            ({"word_count_property": ""}, "word_count_property"),
            ({"page_size": 0}, "page_size"),
            ({"page_size": 101}, "page_size"),
            ({"retry_max_attempts": 0}, "retry_max_attempts"),
            ({"retry_base_delay": -1.0}, "retry_base_delay"),
            ({"retry_max_delay": -1.0}, "retry_max_delay"),
            ({"rate_limit_rps": 0}, "rate_limit_rps"),
            ({"timeout_seconds": 0}, "timeout_seconds"),
        ],
    )
    def test_invalid_values_rejected(self, overrides, match):
        with pytest.raises(ValueError, match=match):
            WordSyncConfig(token="t", database_id="d", **overrides)

    @pytest.mark.parametrize("host", ["localhost", "127.0.0.1"])
    def test_plain_http_allowed_for_local_hosts(self, host):
        config = WordSyncConfig(base_url=f"http://{host}:8080/v1")
        assert config.base_url.startswith("http://")


class TestFromEnv:
    def test_reads_required_variables(self):
        config = WordSyncConfig.from_env(ENV)
        assert config.token == "secret_token_abcd"
        assert config.database_id == "db-env"

    def test_reads_optional_variables(self):
        env = {
            **ENV,
            "WORDSYNC_PROPERTY": "Words",
            "WORDSYNC_SNAPSHOT_DB": "/tmp/a.db",
            "WORDSYNC_HISTORY_DB": "/tmp/b.db",
            "WORDSYNC_LOG_LEVEL": "DEBUG",
        }
        config = WordSyncConfig.from_env(env)
        assert config.word_count_property == "Words"
        assert config.snapshot_db_path == "/tmp/a.db"
        assert config.history_db_path == "/tmp/b.db"
        assert config.log_level == "DEBUG"

    def test_overrides_win(self):
        config = WordSyncConfig.from_env(ENV, database_id="db-cli", page_size=10)
        assert config.database_id == "db-cli"
        assert config.page_size == 10

    def test_empty_variable_counts_as_unset(self):
        config = WordSyncConfig.from_env({**ENV, "WORDSYNC_PROPERTY": ""})
        assert config.word_count_property == DEFAULT_WORD_COUNT_PROPERTY

    @pytest.mark.parametrize("missing", ["NOTION_API_KEY", "NOTION_DATABASE_ID"])
    def test_missing_required_variable_named(self, missing):
        env = {k: v for k, v in ENV.items() if k != missing}
        with pytest.raises(ValueError, match=missing):
            WordSyncConfig.from_env(env)

    def test_defaults_to_process_environment(self, monkeypatch):
        for var in ENV_VARS.values():
            monkeypatch.delenv(var, raising=False)
        monkeypatch.setenv("NOTION_API_KEY", "secret_from_process")
        monkeypatch.setenv("NOTION_DATABASE_ID", "db-process")
        assert WordSyncConfig.from_env().database_id == "db-process"


class TestRepr:
    def test_token_masked(self):
        text = repr(WordSyncConfig(token="secret_token_abcd", database_id="d"))
        assert "secret_token_abcd" not in text
        assert "token='...abcd'" in text
        assert "database_id='d'" in text
        assert text.startswith("WordSyncConfig(")

    @pytest.mark.parametrize("token", ["", "abcd", "abcdefg"])
    def test_short_token_fully_masked(self, token):
        assert "token='****'" in repr(WordSyncConfig(token=token))
