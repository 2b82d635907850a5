"""Tests for the findexa command line."""

import pytest
from typer.testing import CliRunner

from findexa.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Keep ~/.findexarc and FINDEXA_* settings out of the tests."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    for name in ("FINDEXA_CASE_SENSITIVE", "FINDEXA_MAX_FILE_SIZE", "FINDEXA_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    return home


def test_search_prints_report(tmp_path):
    """Search output lists each file with hits and every matching line."""
    first = tmp_path / "a.txt"
    second = tmp_path / "b.txt"
    first.write_text("Needle in haystack\n")
    second.write_text("another needle\n")

    result = runner.invoke(app, ["search", "needle", str(first), str(second)])

    assert result.exit_code == 0
    assert 'Search "needle" (2 hits in 2 files)' in result.output
    assert f"  {first} (1 hits)" in result.output
    assert "    Line 1 (Col 1): Needle in haystack" in result.output
    assert "    Line 1 (Col 9): another needle" in result.output


def test_search_case_sensitive_flag(tmp_path):
    """--case-sensitive drops differently cased hits."""
    target = tmp_path / "a.txt"
    target.write_text("Needle\nneedle\n")

    result = runner.invoke(app, ["search", "needle", str(target), "--case-sensitive"])

    assert result.exit_code == 0
    assert 'Search "needle" (1 hits in 1 files)' in result.output


def test_ignore_case_overrides_config(isolated_home, tmp_path):
    """--ignore-case switches off a case_sensitive default from ~/.findexarc."""
    (isolated_home / ".findexarc").write_text("search:\n  case_sensitive: true\n")
    target = tmp_path / "a.txt"
    target.write_text("Needle\nneedle\n")

    configured = runner.invoke(app, ["search", "needle", str(target)])
    overridden = runner.invoke(app, ["search", "needle", str(target), "--ignore-case"])

    assert 'Search "needle" (1 hits in 1 files)' in configured.output
    assert overridden.exit_code == 0
    assert 'Search "needle" (2 hits in 1 files)' in overridden.output


def test_any_word_overrides_config(isolated_home, tmp_path):
    """--any-word switches off a whole_word default from ~/.findexarc."""
    (isolated_home / ".findexarc").write_text("search:\n  whole_word: true\n")
    target = tmp_path / "a.txt"
    target.write_text("cat catalog\n")

    configured = runner.invoke(app, ["search", "cat", str(target)])
    overridden = runner.invoke(app, ["search", "cat", str(target), "--any-word"])

    assert 'Search "cat" (1 hits in 1 files)' in configured.output
    assert 'Search "cat" (2 hits in 1 files)' in overridden.output


def test_replace_apply_writes_file(tmp_path):
    """--replace with --apply rewrites the file and reports the count."""
    target = tmp_path / "a.txt"
    target.write_text("hello world\nhello world\n")

    result = runner.invoke(app, ["search", "world", str(target), "--replace", "Rust", "--apply"])

    assert result.exit_code == 0
    assert target.read_text() == "hello Rust\nhello Rust\n"
    assert f"Applied 2 replacements to {target}" in result.output


def test_replace_dry_run(tmp_path):
    """--replace alone only previews the change."""
    target = tmp_path / "a.txt"
    target.write_text("hello world\n")

    result = runner.invoke(app, ["search", "world", str(target), "--replace", "Rust"])

    assert result.exit_code == 0
    assert "Dry run only; re-run with --apply to write changes." in result.output
    assert target.read_text() == "hello world\n"


def test_regex_captures(tmp_path):
    """Regex replacements expand capture groups."""
    target = tmp_path / "main.rs"
    target.write_text("let x = 5;\n")

    result = runner.invoke(app, [
        "search", r"let (\w+) = (\d+);", str(target),
        "--regex", "--replace", "const $1: i32 = $2;", "--apply",
    ])

    assert result.exit_code == 0
    assert target.read_text() == "const x: i32 = 5;\n"


def test_apply_requires_replace(tmp_path):
    """--apply without --replace is a usage error."""
    target = tmp_path / "a.txt"
    target.write_text("x\n")

    result = runner.invoke(app, ["search", "x", str(target), "--apply"])

    assert result.exit_code == 2
    assert target.read_text() == "x\n"


def test_no_matches_and_no_files(tmp_path):
    """Empty results produce the plain status messages."""
    target = tmp_path / "a.txt"
    target.write_text("nothing\n")
    empty = tmp_path / "empty"
    empty.mkdir()

    result = runner.invoke(app, ["search", "needle", str(target)])
    assert result.exit_code == 0
    assert "No matches found." in result.output

    result = runner.invoke(app, ["search", "needle", str(empty)])
    assert result.exit_code == 0
    assert "No files to search." in result.output


def test_unreadable_file_warning(tmp_path):
    """Undecodable files are reported as warnings and the search continues."""
    good = tmp_path / "good.txt"
    bad = tmp_path / "bad.txt"
    good.write_text("needle\n")
    bad.write_bytes(b"\xc3\x28")

    result = runner.invoke(app, ["search", "needle", str(bad), str(good)])

    assert result.exit_code == 0
    assert f"warning: {bad}:" in result.output
    assert 'Search "needle" (1 hits in 1 files)' in result.output


def test_invalid_regex_fails(tmp_path):
    """An invalid pattern exits with status 1."""
    target = tmp_path / "a.txt"
    target.write_text("x\n")

    result = runner.invoke(app, ["search", "(", str(target), "--regex"])

    assert result.exit_code == 1


def test_config_and_setup_commands(isolated_home):
    """setup writes ~/.findexarc and config shows it."""
    result = runner.invoke(app, ["setup"])
    assert result.exit_code == 0
    assert (isolated_home / ".findexarc").exists()

    result = runner.invoke(app, ["config"])
    assert result.exit_code == 0
    assert "Findexa Configuration" in result.output
