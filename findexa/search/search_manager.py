"""
Multi-file search orchestration and the high-level manager used by commands.
"""

import logging
import threading
import time
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple, Union

from ..editor.document import DocumentError, TextDocument
from .file_search import FileCollector, FileSearchInput
from .options import SearchOptions
from .report import FileSearchResult, SearchReport
from .search_engine import ReplaceAllOutcome, SearchEngine

logger = logging.getLogger("findexa.search.manager")

SearchInput = Union[FileSearchInput, Tuple[Union[str, Path], Optional[str]]]

MAX_HISTORY = 100


def search_in_files(inputs: Iterable[SearchInput],
                    options: SearchOptions,
                    engine: Optional[SearchEngine] = None) -> SearchReport:
    """
    Search many files and fold the results into one report.

    Files are scanned one after another in the order given, always over the
    whole document. An input without contents (it could not be read or
    decoded) is kept as an empty result carrying its error.

    Raises:
        CompileError: before any file is scanned, if the pattern is unusable
    """
    engine = engine or SearchEngine()
    engine.compile(options)
    scoped = options.whole_document()

    results = []
    for item in inputs:
        search_input = _as_input(item)
        if search_input.contents is None:
            results.append(FileSearchResult(
                search_input.path, [], search_input.error or "file could not be read"
            ))
            continue

        matches = engine.find_all(search_input.contents, scoped)
        logger.debug("%s: %d matches", search_input.path, len(matches))
        results.append(FileSearchResult(search_input.path, matches))

    return SearchReport(results)


def _as_input(item: SearchInput) -> FileSearchInput:
    if isinstance(item, FileSearchInput):
        return item
    path, contents = item
    return FileSearchInput(Path(path), contents)


@dataclass
class SearchHistoryEntry:
    """Record of one completed search."""
    pattern: str
    files_searched: int
    total_matches: int
    execution_time: float
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass
class ReplaceRun:
    """Result of a replace across files, applied or dry-run."""
    report: SearchReport
    outcomes: Dict[Path, ReplaceAllOutcome] = field(default_factory=dict)
    applied: Dict[Path, int] = field(default_factory=dict)
    dry_run: bool = True

    @property
    def total_replacements(self) -> int:
        return sum(outcome.replacement_count for outcome in self.outcomes.values())


class SearchManager:
    """Coordinates file collection, multi-file search and replace runs."""

    def __init__(self,
                 engine: Optional[SearchEngine] = None,
                 collector: Optional[FileCollector] = None):
        self.engine = engine or SearchEngine()
        self.collector = collector or FileCollector()
        self.logger = logging.getLogger("findexa.search.manager")

        self._lock = threading.RLock()
        self.search_history: List[SearchHistoryEntry] = []

    def search_text(self, text: str, options: SearchOptions,
                    path: Optional[Union[str, Path]] = None) -> SearchReport:
        """Search a single in-memory text."""
        return self._timed(options, lambda: self.engine.report(text, options, path))

    def search_files(self, inputs: Iterable[SearchInput], options: SearchOptions) -> SearchReport:
        """Search already loaded ``(path, text)`` inputs."""
        return self._timed(options, lambda: search_in_files(inputs, options, self.engine))

    def search_paths(self, paths: Iterable[Union[str, Path]], options: SearchOptions) -> SearchReport:
        """Collect files under ``paths``, load them and search them."""
        return self.search_files(self.collector.load_inputs(paths), options)

    def replace_in_paths(self,
                         paths: Iterable[Union[str, Path]],
                         options: SearchOptions,
                         replacement: str,
                         apply: bool = False) -> ReplaceRun:
        """
        Plan (and optionally apply) a replace-all in every file under ``paths``.

        Without ``apply`` nothing is written. A file that cannot be opened or
        saved is recorded as an empty result with its error and the run
        continues with the next file.
        """
        self.engine.compile(options)
        scoped = options.whole_document()
        results = []
        run = ReplaceRun(report=SearchReport(), dry_run=not apply)

        for path in self.collector.collect(paths):
            try:
                document = TextDocument.open(path)
                outcome = self.engine.replace_all(document.contents(), scoped, replacement)
                if apply and outcome.changed:
                    document.set_contents(outcome.new_text)
                    document.save()
                    run.applied[path] = outcome.replacement_count
                    self.logger.info(
                        "Applied %d replacements to %s", outcome.replacement_count, path
                    )
            except DocumentError as e:
                self.logger.warning("%s: %s", path, e)
                results.append(FileSearchResult(path, [], str(e)))
                continue

            run.outcomes[path] = outcome
            results.append(FileSearchResult(path, outcome.matches))

        run.report = SearchReport(results)
        return run

    def get_history(self, limit: Optional[int] = None) -> List[SearchHistoryEntry]:
        with self._lock:
            history = list(self.search_history)
        return history[-limit:] if limit else history

    def clear_history(self) -> None:
        with self._lock:
            self.search_history.clear()

    def _timed(self, options: SearchOptions, run) -> SearchReport:
        started = time.perf_counter()
        report = run()
        elapsed = time.perf_counter() - started

        summary = report.summary()
        entry = SearchHistoryEntry(
            pattern=options.pattern,
            files_searched=summary.files_searched,
            total_matches=summary.total_matches,
            execution_time=elapsed,
        )
        with self._lock:
            self.search_history.append(entry)
            # Keep only the most recent searches
            if len(self.search_history) > MAX_HISTORY:
                self.search_history.pop(0)

        self.logger.debug(
            "Search %r: %d matches in %d files (%.3fs)",
            options.pattern, summary.total_matches, summary.files_with_matches, elapsed
        )
        return report
