"""Block to plain-text extraction.

:func:`extract_text` maps one :class:`~wordsync.models.Block` to the text it
contributes to its page's word count:

1. A block whose payload carries ``rich_text`` contributes the
   concatenated ``plain_text`` of its spans.
2. Otherwise the type tag picks a handler from :data:`_TEXT_EXTRACTORS`;
   unknown types fall back to :data:`UNSUPPORTED_MARKER`.
3. Blocks with children get :data:`HAS_CHILDREN_SUFFIX` appended.  The
   children themselves are counted separately by the walker.

The markers are counted like any other text, so they are part of the
result and must stay stable.
"""

from __future__ import annotations

from collections.abc import Callable

from wordsync.models import Block

MEDIA_MARKER = "[Media Block]"
UNSUPPORTED_MARKER = "[Unsupported or non-text block]"
HAS_CHILDREN_SUFFIX = " (Has children)"

# Rendered as MEDIA_MARKER regardless of source (external or uploaded).
_MEDIA_TYPES: frozenset[str] = frozenset({
    "embed",
    "video",
    "file",
    "image",
    "pdf",
})


def rich_text_to_plain(rich_text: list[dict]) -> str:
    """Concatenate the ``plain_text`` of each rich-text span, no separators."""
    return "".join(span.get("plain_text", "") for span in rich_text)


def _url(block: Block) -> str:
    return block.payload.get("url", "")


def _child_page(block: Block) -> str:
    return f"[Sub-page: {block.payload.get('title', '')}]"


def _equation(block: Block) -> str:
    return block.payload.get("expression", "")


def _media(block: Block) -> str:
    return MEDIA_MARKER


_TextExtractor = Callable[[Block], str]

_TEXT_EXTRACTORS: dict[str, _TextExtractor] = {
    "bookmark": _url,
    "link_preview": _url,
    "child_page": _child_page,
    "equation": _equation,
    **{media_type: _media for media_type in _MEDIA_TYPES},
}


def extract_text(block: Block) -> str:
    """Return the plain text *block* contributes to the word count."""
    rich_text = block.payload.get("rich_text")
    if isinstance(rich_text, list):
        text = rich_text_to_plain(rich_text)
    else:
        extractor = _TEXT_EXTRACTORS.get(block.type)
        text = extractor(block) if extractor is not None else UNSUPPORTED_MARKER

    if block.has_children:
        text += HAS_CHILDREN_SUFFIX

    return text
