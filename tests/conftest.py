"""Shared test fixtures for the wordsync test suite."""

from __future__ import annotations

import pytest
from fakes import FakeWorkspace

from wordsync.config import WordSyncConfig
from wordsync.store import InMemoryHistoryStore, InMemorySnapshotStore


@pytest.fixture
def config() -> WordSyncConfig:
    """Default test configuration with a dummy token and database."""
    return WordSyncConfig(token="test_token_1234", database_id="db-1")


@pytest.fixture
def workspace() -> FakeWorkspace:
    return FakeWorkspace()


@pytest.fixture
def snapshots() -> InMemorySnapshotStore:
    return InMemorySnapshotStore()


@pytest.fixture
def history() -> InMemoryHistoryStore:
    return InMemoryHistoryStore()
