"""
Stateless search facade: search, one-shot find and pure replace planning.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from .match_locator import SearchMatch, iter_located, locate
from .options import SearchDirection, SearchOptions
from .pattern_matcher import Matcher, PatternMatcher
from .report import FileSearchResult, SearchReport
from .text_index import TextIndex


@dataclass
class ReplaceAllOutcome:
    """Result of planning a replace-all; nothing has been written anywhere."""
    new_text: str
    replacement_count: int
    matches: List[SearchMatch] = field(default_factory=list)
    original_text: str = ""

    @property
    def changed(self) -> bool:
        return self.replacement_count > 0


class SearchEngine:
    """Runs searches over plain text without keeping any per-document state."""

    def __init__(self, pattern_matcher: Optional[PatternMatcher] = None):
        self.pattern_matcher = pattern_matcher or PatternMatcher()
        self.logger = logging.getLogger("findexa.search.engine")

    def compile(self, options: SearchOptions) -> Matcher:
        return self.pattern_matcher.compile(
            options.pattern,
            options.is_regex,
            options.case_sensitive,
            options.dot_matches_newline,
        )

    def find_all(self, text: str, options: SearchOptions) -> List[SearchMatch]:
        """All matches inside ``options.scope``, ascending by start offset."""
        matcher = self.compile(options)
        return locate(text, matcher, options.scope, options.whole_word)

    def search(self, text: str, options: SearchOptions,
               path: Optional[Union[str, Path]] = None) -> FileSearchResult:
        """
        Search one text.

        Raises:
            CompileError: the pattern is empty or does not parse
            InvalidScopeError: the scope does not fit the text
        """
        matches = self.find_all(text, options)
        return FileSearchResult(Path(path) if path is not None else None, matches)

    def report(self, text: str, options: SearchOptions,
               path: Optional[Union[str, Path]] = None) -> SearchReport:
        return SearchReport([self.search(text, options, path)])

    def find(self, text: str, options: SearchOptions, cursor: int = 0) -> Optional[SearchMatch]:
        """
        Find the next match from a byte ``cursor`` in ``options.direction``.

        Forward returns the first match starting at or after the cursor (or
        containing it); backward returns the last match ending at or before it.
        ``options.wrap`` continues from the other end of the scope.
        """
        matches = self.find_all(text, options)
        if not matches:
            return None

        if options.direction == SearchDirection.FORWARD:
            for match in matches:
                if match.start >= cursor or match.start < cursor < match.end:
                    return match
            return matches[0] if options.wrap else None

        candidate = None
        for match in matches:
            if match.end <= cursor:
                candidate = match
        if candidate is not None:
            return candidate
        return matches[-1] if options.wrap else None

    def replace_all(self, text: str, options: SearchOptions, replacement: str) -> ReplaceAllOutcome:
        """
        Plan the replacement of every match in scope.

        The returned outcome carries the rewritten text, the number of
        replacements and the matches as they were before replacement.

        Raises:
            CompileError: the pattern is empty or does not parse
            InvalidScopeError: the scope does not fit the text
            InvalidReplacementError: the replacement references a missing group
        """
        matcher = self.compile(options)
        index = TextIndex(text)
        located = list(iter_located(text, matcher, options.scope, options.whole_word, index))
        if not located:
            return ReplaceAllOutcome(new_text=text, replacement_count=0, original_text=text)

        # Rewrite from the last match backwards so earlier spans keep their offsets.
        pieces = []
        tail_start = len(text)
        for found, _ in reversed(located):
            start, end = found.span()
            pieces.append(text[end:tail_start])
            pieces.append(matcher.expand(found, replacement))
            tail_start = start
        pieces.append(text[:tail_start])

        matches = [match for _, match in located]
        self.logger.debug(
            "Planned %d replacements of %r", len(matches), options.pattern
        )
        return ReplaceAllOutcome(
            new_text="".join(reversed(pieces)),
            replacement_count=len(matches),
            matches=matches,
            original_text=text,
        )


_default_engine = SearchEngine()


def search(text: str, options: SearchOptions) -> FileSearchResult:
    return _default_engine.search(text, options)


def replace_all(text: str, options: SearchOptions, replacement: str) -> ReplaceAllOutcome:
    return _default_engine.replace_all(text, options, replacement)


def find(text: str, options: SearchOptions, cursor: int = 0) -> Optional[SearchMatch]:
    return _default_engine.find(text, options, cursor)
