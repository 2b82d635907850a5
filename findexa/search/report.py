"""
Search reports: per-file match collections with live summary counts,
bulk marking and search-in-results.
"""

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Callable, Iterator, List, Optional, Tuple

from .match_locator import SearchMatch, locate
from .options import SearchOptions
from .pattern_matcher import PatternMatcher, compile_pattern

MatchPredicate = Callable[[SearchMatch], bool]


@dataclass
class FileSearchResult:
    """Matches found in one file or in-memory document."""
    path: Optional[Path] = None
    matches: List[SearchMatch] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not self.matches

    @property
    def label(self) -> str:
        return str(self.path) if self.path is not None else "<unsaved>"


@dataclass(frozen=True)
class SearchSummary:
    """Aggregate counters for result panels and status bars."""
    total_matches: int
    files_with_matches: int
    files_searched: int
    skipped_files: int


@dataclass(frozen=True)
class MarkSummary:
    """Outcome of a bulk mark operation."""
    newly_marked: int
    already_marked: int

    @property
    def total(self) -> int:
        return self.newly_marked + self.already_marked


class SearchReport:
    """Ordered per-file results; summary counts are always derived from them."""

    def __init__(self, results: Optional[List[FileSearchResult]] = None):
        self._results: Tuple[FileSearchResult, ...] = tuple(results or ())

    @property
    def results(self) -> Tuple[FileSearchResult, ...]:
        return self._results

    @property
    def total_matches(self) -> int:
        return sum(len(entry.matches) for entry in self._results)

    @property
    def files_with_matches(self) -> int:
        return sum(1 for entry in self._results if entry.matches)

    @property
    def skipped_files(self) -> int:
        return sum(1 for entry in self._results if entry.error is not None)

    @property
    def is_empty(self) -> bool:
        return self.total_matches == 0

    def summary(self) -> SearchSummary:
        return SearchSummary(
            total_matches=self.total_matches,
            files_with_matches=self.files_with_matches,
            files_searched=len(self._results) - self.skipped_files,
            skipped_files=self.skipped_files,
        )

    def iter_matches(self) -> Iterator[Tuple[FileSearchResult, SearchMatch]]:
        for entry in self._results:
            for match in entry.matches:
                yield entry, match

    def mark_where(self, predicate: MatchPredicate) -> MarkSummary:
        """Mark every match satisfying ``predicate``; existing marks are never removed."""
        newly_marked = 0
        already_marked = 0
        for _, match in self.iter_matches():
            if not predicate(match):
                continue
            if match.is_marked:
                already_marked += 1
            else:
                match.mark()
                newly_marked += 1
        return MarkSummary(newly_marked=newly_marked, already_marked=already_marked)

    def clear_marks(self, predicate: Optional[MatchPredicate] = None) -> int:
        """Unmark matches (all, or those satisfying ``predicate``); returns how many changed."""
        cleared = 0
        for _, match in self.iter_matches():
            if match.is_marked and (predicate is None or predicate(match)):
                match.clear_mark()
                cleared += 1
        return cleared

    def search_in_results(self,
                          options: SearchOptions,
                          pattern_matcher: Optional[PatternMatcher] = None) -> "SearchReport":
        """
        Apply a second pattern to the line text of each existing match.

        Matches whose line contains the sub-pattern are kept with their
        original absolute offsets; every file entry is kept, even when none of
        its matches survive.
        """
        matcher = compile_pattern(
            options.pattern,
            options.is_regex,
            options.case_sensitive,
            options.dot_matches_newline,
            matcher=pattern_matcher,
        )

        filtered = []
        for entry in self._results:
            retained = [
                replace(match)
                for match in entry.matches
                if locate(match.line_text, matcher, whole_word=options.whole_word)
            ]
            filtered.append(FileSearchResult(entry.path, retained, entry.error))
        return SearchReport(filtered)

    def render_lines(self, pattern: str) -> List[str]:
        """Plain-text rendering grouped by file, as printed by the CLI."""
        lines = [
            f'Search "{pattern}" ({self.total_matches} hits in {self.files_with_matches} files)'
        ]
        for entry in self._results:
            if not entry.matches:
                continue
            lines.append(f"  {entry.label} ({len(entry.matches)} hits)")
            for match in entry.matches:
                lines.append(f"    Line {match.line} (Col {match.column}): {match.line_text}")
        return lines

    def __len__(self) -> int:
        return len(self._results)

    def __repr__(self) -> str:
        return (
            f"SearchReport({len(self._results)} files, {self.total_matches} matches)"
        )


def format_report(report: SearchReport, pattern: str) -> str:
    return "\n".join(report.render_lines(pattern))
