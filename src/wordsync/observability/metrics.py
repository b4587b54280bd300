"""Metrics hook protocol and no-op default implementation.

wordsync emits counters, timings and gauges around API requests and sync
runs.  By default a :class:`NoopMetricsHook` discards them; pass any object
satisfying :class:`MetricsHook` as ``WordSyncConfig.metrics`` to route them
to StatsD, Prometheus, Datadog, etc.

Emitted metric names:

* ``wordsync.requests_total``               -- counter
* ``wordsync.retries_total``                -- counter
* ``wordsync.rate_limited_total``           -- counter
* ``wordsync.request_duration_ms``          -- timing
* ``wordsync.rate_limit_wait_ms``           -- timing
* ``wordsync.documents_skipped_total``      -- counter
* ``wordsync.documents_reprocessed_total``  -- counter
* ``wordsync.documents_failed_total``       -- counter
* ``wordsync.blocks_visited_total``         -- counter
* ``wordsync.total_words``                  -- gauge
* ``wordsync.sync_duration_ms``             -- timing
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class MetricsHook(Protocol):
    """Protocol that any metrics backend must satisfy.

    *tags* keys and values are strings; backends translate them into
    whatever labelling scheme they support.
    """

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Increment a counter metric."""
        ...

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Record a duration in milliseconds."""
        ...

    def gauge(
        self,
        name: str,
        value: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Set a gauge metric to an absolute value."""
        ...


class NoopMetricsHook:
    """Default metrics implementation that discards every data point."""

    __slots__ = ()

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass

    def gauge(
        self,
        name: str,
        value: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass
