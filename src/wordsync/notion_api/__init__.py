"""wordsync.notion_api -- Notion API transport and endpoint wrappers.

* :mod:`.rate_limit` -- Async token bucket.
* :mod:`.retries` -- Retry decision logic and exponential backoff.
* :mod:`.transport` -- HTTP transport with auth, retries, and rate limiting.
* :mod:`.databases` -- Database query (document listing).
* :mod:`.blocks` -- Block children listing.
* :mod:`.pages` -- Page read and property update.
"""

from __future__ import annotations

from .blocks import AsyncBlockAPI
from .databases import AsyncDatabaseAPI
from .pages import AsyncPageAPI
from .rate_limit import AsyncTokenBucket
from .retries import compute_backoff, should_retry
from .transport import AsyncNotionTransport

__all__ = [
    "AsyncBlockAPI",
    "AsyncDatabaseAPI",
    "AsyncNotionTransport",
    "AsyncPageAPI",
    "AsyncTokenBucket",
    "compute_backoff",
    "should_retry",
]
