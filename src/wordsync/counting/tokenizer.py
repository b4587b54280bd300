"""Word tokenizer.

A *word* is a maximal run of Unicode letters, Unicode numerals or
emoji-presentation code points.  Punctuation, whitespace and symbols split
runs; nothing else does (no locale segmentation, no special handling of
combining marks), so ``"non-text"`` is two words and ``"日本語"`` is one.
"""

from __future__ import annotations

import regex

# The stdlib ``re`` module has no Unicode property classes.
_WORD_RE = regex.compile(r"[\p{L}\p{N}\p{Emoji_Presentation}]+")


def count_words(text: str | None) -> int:
    """Return the number of words in *text* (``0`` for empty or ``None``)."""
    if not text:
        return 0
    return sum(1 for _ in _WORD_RE.finditer(text))
