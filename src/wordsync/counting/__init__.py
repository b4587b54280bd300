"""Word counting over Notion block trees.

* :mod:`.tokenizer` -- :func:`count_words` for a text fragment.
* :mod:`.extractor` -- :func:`extract_text` for one block.
* :mod:`.walker` -- :class:`BlockTreeWalker`, lazy pre-order traversal.
* :mod:`.counter` -- :class:`WordCounter`, the three combined per page.
"""

from __future__ import annotations

from .counter import WordCounter
from .extractor import (
    HAS_CHILDREN_SUFFIX,
    MEDIA_MARKER,
    UNSUPPORTED_MARKER,
    extract_text,
    rich_text_to_plain,
)
from .tokenizer import count_words
from .walker import BlockChildrenSource, BlockTreeWalker

__all__ = [
    "HAS_CHILDREN_SUFFIX",
    "MEDIA_MARKER",
    "UNSUPPORTED_MARKER",
    "BlockChildrenSource",
    "BlockTreeWalker",
    "WordCounter",
    "count_words",
    "extract_text",
    "rich_text_to_plain",
]
