"""
Match locator: scans text with a compiled matcher inside a scope.
"""

import logging
import re
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from .options import SearchScope
from .pattern_matcher import Matcher
from .text_index import TextIndex

logger = logging.getLogger("findexa.search.locator")

_WORD_CHARS = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_")


@dataclass
class SearchMatch:
    """One located occurrence; offsets are UTF-8 bytes, half-open."""
    start: int
    end: int
    line: int
    column: int
    matched: str
    line_text: str
    is_marked: bool = False

    def mark(self) -> None:
        self.is_marked = True

    def clear_mark(self) -> None:
        self.is_marked = False


def is_whole_word(text: str, start: int, end: int) -> bool:
    """True when the characters around ``text[start:end]`` are not ASCII word characters."""
    if start > 0 and text[start - 1] in _WORD_CHARS:
        return False
    if end < len(text) and text[end] in _WORD_CHARS:
        return False
    return True


def iter_located(text: str,
                 matcher: Matcher,
                 scope: SearchScope,
                 whole_word: bool = False,
                 index: Optional[TextIndex] = None) -> Iterator[Tuple["re.Match", SearchMatch]]:
    """
    Yield ``(re.Match, SearchMatch)`` pairs in ascending offset order.

    Scanning is confined to the scope, while line and column are computed
    against the full text. Zero-length matches are skipped.
    """
    index = index or TextIndex(text)
    byte_start, byte_end = scope.resolve(index.byte_length)
    char_start, char_end = index.byte_range_to_chars(byte_start, byte_end)
    if char_start == char_end:
        return

    skipped_empty = 0
    rejected_words = 0
    for found in matcher.regex.finditer(text, char_start, char_end):
        start, end = found.span()
        if start == end:
            # finditer already steps past empty matches, so this cannot loop
            skipped_empty += 1
            continue
        if whole_word and not is_whole_word(text, start, end):
            rejected_words += 1
            continue

        line, column = index.line_and_column(start)
        yield found, SearchMatch(
            start=index.char_to_byte(start),
            end=index.char_to_byte(end),
            line=line,
            column=column,
            matched=found.group(0),
            line_text=index.line_text(line).strip(),
        )

    if skipped_empty:
        logger.debug(
            "Skipped %d zero-length matches of %r", skipped_empty, matcher.pattern
        )
    if rejected_words:
        logger.debug(
            "Discarded %d matches of %r failing the whole-word check",
            rejected_words, matcher.pattern
        )


def locate(text: str,
           matcher: Matcher,
           scope: Optional[SearchScope] = None,
           whole_word: bool = False,
           index: Optional[TextIndex] = None) -> List[SearchMatch]:
    """Return every match of ``matcher`` in ``text`` within ``scope``."""
    return [
        match for _, match in iter_located(
            text, matcher, scope or SearchScope.whole_document(), whole_word, index
        )
    ]
