"""Tests for search reports, marking and search-in-results."""

from pathlib import Path

from findexa.search import SearchOptions, format_report, search_in_files
from findexa.search.report import FileSearchResult, SearchReport


def _report(files, pattern="hello"):
    return search_in_files(files, SearchOptions(pattern=pattern))


def test_summary_counts_are_derived():
    """Totals always reflect the entries the report holds."""
    report = _report([
        ("a.txt", "hello\nhello world"),
        ("b.txt", "nothing"),
        ("c.txt", "Hello"),
    ])
    summary = report.summary()

    assert summary.total_matches == 3
    assert summary.files_with_matches == 2
    assert summary.files_searched == 3
    assert summary.skipped_files == 0
    assert not report.is_empty


def test_mark_where_is_idempotent():
    """Marking twice marks nothing new the second time."""
    report = _report([("a.txt", "hello\nhello world\nbye")])

    first = report.mark_where(lambda m: True)
    second = report.mark_where(lambda m: True)

    assert (first.newly_marked, first.already_marked) == (2, 0)
    assert (second.newly_marked, second.already_marked) == (0, 2)
    assert second.total == 2
    assert all(m.is_marked for _, m in report.iter_matches())


def test_mark_where_never_unmarks():
    """A predicate that rejects a marked match leaves its mark alone."""
    report = _report([("a.txt", "hello\nhello")])
    report.mark_where(lambda m: m.line == 1)
    summary = report.mark_where(lambda m: m.line == 2)

    assert summary.newly_marked == 1
    assert all(m.is_marked for _, m in report.iter_matches())


def test_clear_marks_with_predicate():
    """Clearing marks can be limited to matching entries."""
    report = _report([("a.txt", "hello\nhello\nhello")])
    report.mark_where(lambda m: True)

    assert report.clear_marks(lambda m: m.line == 2) == 1
    assert [m.is_marked for _, m in report.iter_matches()] == [True, False, True]
    assert report.clear_marks() == 2


def test_search_in_results_filters_lines():
    """Only matches whose line contains the sub-pattern survive, offsets unchanged."""
    report = _report([
        ("a.txt", "hello world\nhello there\nworld"),
        ("b.txt", "goodbye world"),
    ])
    filtered = report.search_in_results(SearchOptions(pattern="world"))

    assert len(filtered) == 2
    assert [r.path for r in filtered.results] == [Path("a.txt"), Path("b.txt")]
    kept = filtered.results[0].matches
    assert [(m.start, m.line) for m in kept] == [(0, 1)]
    assert filtered.results[1].matches == []
    assert filtered.total_matches == 1


def test_search_in_results_copies_matches():
    """Marking the filtered report does not touch the original."""
    report = _report([("a.txt", "hello world")])
    filtered = report.search_in_results(SearchOptions(pattern="world"))
    filtered.mark_where(lambda m: True)

    assert not any(m.is_marked for _, m in report.iter_matches())


def test_render_lines_skips_files_without_matches():
    """The rendering lists only files with hits, with line and column per match."""
    report = _report([
        ("a.txt", "Needle in haystack"),
        ("b.txt", "nothing"),
        ("c.txt", "another needle"),
    ], pattern="needle")

    assert report.render_lines("needle") == [
        'Search "needle" (2 hits in 2 files)',
        "  a.txt (1 hits)",
        "    Line 1 (Col 1): Needle in haystack",
        "  c.txt (1 hits)",
        "    Line 1 (Col 9): another needle",
    ]
    assert format_report(report, "needle").startswith('Search "needle"')


def test_unsaved_label_and_skipped_files():
    """Entries without a path render as <unsaved>; entries with errors count as skipped."""
    report = SearchReport([
        FileSearchResult(None, []),
        FileSearchResult(Path("bad.bin"), [], "not valid utf-8 text"),
    ])

    assert report.results[0].label == "<unsaved>"
    assert report.skipped_files == 1
    assert report.summary().files_searched == 1
    assert report.is_empty
