"""
Stateful search session bound to one open document.

The session caches the report for the document, tracks the active match,
drives Find Next / Find Previous with wrap-around, issues replacements through
the document interface and remembers which bookmarks it set itself, so that
clearing search marks never removes bookmarks the user placed.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, List, Optional, Set

from ..editor.bookmarks import BookmarkStore
from ..editor.document import Document
from .errors import InvalidScopeError
from .match_locator import SearchMatch, iter_located
from .options import SearchDirection, SearchOptions, SearchScope
from .report import SearchReport
from .search_engine import ReplaceAllOutcome, SearchEngine
from .text_index import TextIndex


class SessionState(Enum):
    IDLE = "idle"
    HAS_RESULTS = "has_results"


class NavigationStatus(Enum):
    FOUND = "found"
    WRAPPED = "wrapped"
    NO_MORE_MATCHES = "no_more_matches"
    NO_MATCHES = "no_matches"
    STALE = "stale"


class ReplaceStatus(Enum):
    REPLACED = "replaced"
    NO_ACTIVE_MATCH = "no_active_match"
    STALE = "stale"


@dataclass
class NavigationResult:
    """Outcome of a navigation step; ``match`` is None unless one became active."""
    status: NavigationStatus
    match: Optional[SearchMatch] = None

    def __bool__(self) -> bool:
        return self.match is not None


@dataclass
class ReplaceResult:
    """Outcome of replacing the active match."""
    status: ReplaceStatus
    replaced: Optional[SearchMatch] = None
    replacement_text: str = ""
    next_match: Optional[SearchMatch] = None

    def __bool__(self) -> bool:
        return self.status == ReplaceStatus.REPLACED


class SearchSession:
    """Search state for one document: cached report, cursor and session-owned marks."""

    def __init__(self,
                 document: Document,
                 options: SearchOptions,
                 replacement: str = "",
                 engine: Optional[SearchEngine] = None):
        self.document = document
        self.replacement = replacement
        self.engine = engine or SearchEngine()
        self.logger = logging.getLogger("findexa.search.session")

        self.engine.compile(options)
        self._options = options
        self._report: Optional[SearchReport] = None
        self._active_index: Optional[int] = None
        self._marked_lines: Set[int] = set()
        self._needs_refresh = False
        self._stale = False
        self.state = SessionState.IDLE

    # ------------------------------------------------------------------ state

    @property
    def options(self) -> SearchOptions:
        return self._options

    def set_options(self, options: SearchOptions) -> None:
        """Swap the options; the cached report and cursor are dropped."""
        self.engine.compile(options)
        self._options = options
        self._invalidate()

    def set_selection_scope(self, start: int, end: int) -> None:
        """Restrict the session to a selection; an empty selection means the whole document."""
        if start == end:
            scope = SearchScope.whole_document()
        else:
            scope = SearchScope.selection(min(start, end), max(start, end))
        self.set_options(self._options.with_changes(scope=scope))

    @property
    def report(self) -> Optional[SearchReport]:
        return self._report

    @property
    def matches(self) -> List[SearchMatch]:
        if self._report is None:
            return []
        return [match for _, match in self._report.iter_matches()]

    @property
    def active_index(self) -> Optional[int]:
        return self._active_index

    @property
    def current(self) -> Optional[SearchMatch]:
        if self._active_index is None:
            return None
        matches = self.matches
        if self._active_index >= len(matches):
            return None
        return matches[self._active_index]

    @property
    def marked_lines(self) -> FrozenSet[int]:
        return frozenset(self._marked_lines)

    @property
    def is_stale(self) -> bool:
        return self._stale

    # ---------------------------------------------------------------- refresh

    def refresh(self, snapshot: Optional[str] = None) -> SearchReport:
        """
        Recompute the report against ``snapshot`` or the document's current text.

        The active match survives only if an identical match (same offsets and
        text) still exists; otherwise the cursor is reset.
        """
        text = snapshot if snapshot is not None else self.document.contents()
        previous = self.current

        report = self.engine.report(text, self._options)
        if self._marked_lines:
            report.mark_where(lambda m: m.line in self._marked_lines)

        self._report = report
        self._active_index = None
        if previous is not None:
            for i, match in enumerate(self.matches):
                if (match.start, match.end, match.matched) == (previous.start, previous.end, previous.matched):
                    self._active_index = i
                    break

        self._needs_refresh = False
        self._stale = False
        self.state = SessionState.HAS_RESULTS
        self.logger.debug(
            "Refreshed %r: %d matches", self._options.pattern, report.total_matches
        )
        return report

    def _ensure_report(self) -> bool:
        """Refresh lazily; False while the session is stale after a failed edit."""
        if self._stale:
            return False
        if self._report is None or self._needs_refresh:
            self.refresh()
        return True

    def _invalidate(self) -> None:
        self._report = None
        self._active_index = None
        self._needs_refresh = True

    # ------------------------------------------------------------- navigation

    def find_next(self) -> NavigationResult:
        return self._advance(SearchDirection.FORWARD)

    def find_previous(self) -> NavigationResult:
        return self._advance(SearchDirection.BACKWARD)

    def find(self) -> NavigationResult:
        """Step in the direction configured on the options."""
        return self._advance(self._options.direction)

    def _advance(self, direction: SearchDirection) -> NavigationResult:
        if not self._ensure_report():
            return NavigationResult(NavigationStatus.STALE)

        count = len(self.matches)
        if count == 0:
            return NavigationResult(NavigationStatus.NO_MATCHES)

        status = NavigationStatus.FOUND
        current = self._active_index
        if direction == SearchDirection.FORWARD:
            if current is None:
                target = 0
            elif current + 1 < count:
                target = current + 1
            elif self._options.wrap:
                target = 0
                status = NavigationStatus.WRAPPED
            else:
                return NavigationResult(NavigationStatus.NO_MORE_MATCHES)
        else:
            if current is None:
                target = count - 1
            elif current > 0:
                target = current - 1
            elif self._options.wrap:
                target = count - 1
                status = NavigationStatus.WRAPPED
            else:
                return NavigationResult(NavigationStatus.NO_MORE_MATCHES)

        self._active_index = target
        return NavigationResult(status, self.matches[target])

    # ---------------------------------------------------------------- replace

    def replace_current(self,
                        document: Optional[Document] = None,
                        replacement: Optional[str] = None) -> ReplaceResult:
        """
        Replace the active match, save the document and move to the next match.

        Document failures propagate unchanged and leave the session stale
        until ``refresh`` is called.
        """
        document = document or self.document
        replacement = self.replacement if replacement is None else replacement

        if not self._ensure_report():
            return ReplaceResult(ReplaceStatus.STALE)
        target = self.current
        if target is None:
            return ReplaceResult(ReplaceStatus.NO_ACTIVE_MATCH)

        new_text = self._expand_replacement(document.contents(), target, replacement)
        if new_text is None:
            self._stale = True
            return ReplaceResult(ReplaceStatus.STALE, replaced=target)

        try:
            document.apply_edit(target.start, target.end, new_text)
            document.save()
        except Exception:
            self._stale = True
            raise

        self.logger.info(
            "Replaced match at %d-%d (line %d)", target.start, target.end, target.line
        )
        self.refresh(document.contents())
        self._active_index = self._first_index_from(target.start + len(new_text.encode("utf-8")))
        return ReplaceResult(
            ReplaceStatus.REPLACED,
            replaced=target,
            replacement_text=new_text,
            next_match=self.current,
        )

    def _expand_replacement(self, text: str, target: SearchMatch, replacement: str) -> Optional[str]:
        """Replacement text for ``target``, or None if the document no longer holds it."""
        index = TextIndex(text)
        try:
            char_start, char_end = index.byte_range_to_chars(target.start, target.end)
        except InvalidScopeError:
            return None
        if text[char_start:char_end] != target.matched:
            return None
        if not self._options.is_regex:
            return replacement

        matcher = self.engine.compile(self._options)
        for found, match in iter_located(text, matcher, self._options.scope,
                                         self._options.whole_word, index):
            if match.start == target.start:
                return matcher.expand(found, replacement)
            if match.start > target.start:
                break
        return None

    def replace_all(self,
                    scope: Optional[SearchScope] = None,
                    document: Optional[Document] = None,
                    replacement: Optional[str] = None) -> ReplaceAllOutcome:
        """
        Replace every match in ``scope`` (default: the session scope) in one edit.

        The cached report is invalidated; the next navigation recomputes it.
        """
        document = document or self.document
        replacement = self.replacement if replacement is None else replacement
        options = self._options if scope is None else self._options.with_changes(scope=scope)

        original = document.contents()
        outcome = self.engine.replace_all(original, options, replacement)
        if outcome.changed:
            try:
                document.apply_edit(0, len(original.encode("utf-8")), outcome.new_text)
                document.save()
            except Exception:
                self._stale = True
                raise
            self.logger.info(
                "Replaced %d matches of %r", outcome.replacement_count, options.pattern
            )

        self._invalidate()
        return outcome

    def _first_index_from(self, offset: int) -> Optional[int]:
        matches = self.matches
        for i, match in enumerate(matches):
            if match.start >= offset:
                return i
        if matches and self._options.wrap:
            return 0
        return None

    # -------------------------------------------------------------- bookmarks

    def mark_current(self, bookmarks: BookmarkStore) -> Optional[int]:
        """
        Toggle a search bookmark on the active match's line.

        Lines bookmarked by the user are left alone. Returns the line, or None
        when there is no active match.
        """
        target = self.current
        if target is None:
            return None

        line = target.line
        if line in self._marked_lines:
            bookmarks.clear_bookmark(line)
            self._marked_lines.discard(line)
            self._report.clear_marks(lambda m: m.line == line)
        elif not bookmarks.is_bookmarked(line):
            bookmarks.set_bookmark(line)
            self._marked_lines.add(line)
            self._report.mark_where(lambda m: m.line == line)
        return line

    def mark_all(self, bookmarks: BookmarkStore) -> int:
        """Bookmark every line holding a match; returns how many lines were newly bookmarked."""
        if not self._ensure_report():
            return 0

        newly_marked = 0
        for match in self.matches:
            line = match.line
            if line in self._marked_lines or bookmarks.is_bookmarked(line):
                continue
            bookmarks.set_bookmark(line)
            self._marked_lines.add(line)
            newly_marked += 1

        self._report.mark_where(lambda m: m.line in self._marked_lines)
        return newly_marked

    def clear_marks(self, bookmarks: BookmarkStore) -> int:
        """Remove only the bookmarks this session set; returns how many were removed."""
        lines = sorted(self._marked_lines)
        for line in lines:
            bookmarks.clear_bookmark(line)
        if self._report is not None:
            recorded = set(lines)
            self._report.clear_marks(lambda m: m.line in recorded)
        self._marked_lines.clear()
        return len(lines)

    # ------------------------------------------------------- search in results

    def search_in_results(self, options: SearchOptions) -> SearchReport:
        if not self._ensure_report():
            return SearchReport()
        return self._report.search_in_results(options, self.engine.pattern_matcher)
