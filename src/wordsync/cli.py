"""Command-line trigger for a sync run.

``wordsync`` (or ``python -m wordsync``) loads a ``.env`` file, builds a
:class:`~wordsync.config.WordSyncConfig` from the environment, runs one
sync and prints a one-line JSON summary.  Exit status is ``0`` on success,
``1`` on a failed run and ``2`` on bad configuration.
"""

from __future__ import annotations

import argparse
import asyncio
import dataclasses
import json
import sys
from collections.abc import Sequence

from dotenv import load_dotenv

from wordsync.client import AsyncWordSyncClient
from wordsync.config import WordSyncConfig
from wordsync.errors import WordSyncError
from wordsync.models import SyncResult
from wordsync.observability import get_logger, set_level


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wordsync",
        description="Synchronise Notion page word counts into local SQLite stores.",
    )
    parser.add_argument(
        "--env-file",
        default=None,
        help="Path of a .env file to load (default: search from the working directory)",
    )
    parser.add_argument("--database-id", default=None, help="Overrides NOTION_DATABASE_ID")
    parser.add_argument("--property", dest="word_count_property", default=None,
                        help="Number property the count is written to")
    parser.add_argument("--snapshot-db", dest="snapshot_db_path", default=None)
    parser.add_argument("--history-db", dest="history_db_path", default=None)
    parser.add_argument("--log-level", default=None)
    parser.add_argument(
        "--debug-dump-payload",
        action="store_true",
        help="Write redacted API requests and responses to stderr",
    )
    return parser


async def _run(config: WordSyncConfig) -> SyncResult:
    async with AsyncWordSyncClient(config=config) as client:
        return await client.run_sync()


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    load_dotenv(args.env_file)

    overrides = {
        key: value
        for key, value in (
            ("database_id", args.database_id),
            ("word_count_property", args.word_count_property),
            ("snapshot_db_path", args.snapshot_db_path),
            ("history_db_path", args.history_db_path),
            ("log_level", args.log_level),
        )
        if value is not None
    }
    if args.debug_dump_payload:
        overrides["debug_dump_payload"] = True

    try:
        config = WordSyncConfig.from_env(**overrides)
    except ValueError as exc:
        print(f"wordsync: {exc}", file=sys.stderr)
        return 2

    log = get_logger("wordsync")
    set_level(config.log_level)

    try:
        result = asyncio.run(_run(config))
    except WordSyncError as exc:
        log.error(
            "Failed to update word count",
            extra={"extra_fields": {"code": exc.code, "error": exc.message}},
        )
        return 1
    except Exception as exc:
        log.error(
            "Failed to update word count",
            extra={"extra_fields": {"error": repr(exc)}},
        )
        return 1

    print(json.dumps(dataclasses.asdict(result)))
    return 0
