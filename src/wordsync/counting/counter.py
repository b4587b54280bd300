"""Per-page word counting."""

from __future__ import annotations

from .extractor import extract_text
from .tokenizer import count_words
from .walker import BlockTreeWalker


class WordCounter:
    """Count the words of a page from its current block tree.

    Every visited block contributes its extracted text, containers and
    annotation blocks included.  Nothing is cached between calls.
    """

    def __init__(self, walker: BlockTreeWalker) -> None:
        self._walker = walker

    async def count_document(self, document_id: str) -> int:
        """Return the word count of page *document_id*.

        Raises :class:`~wordsync.errors.TraversalError` if the tree could
        not be listed completely.
        """
        total = 0
        async for block in self._walker.walk(document_id):
            total += count_words(extract_text(block))
        return total
