"""Tests for the slash-style search command."""

import asyncio
import os
from unittest.mock import patch

from findexa.commands import SearchCommand
from findexa.config import Config


def _command(tmp_path):
    with patch.dict(os.environ, {}, clear=True):
        config = Config(config_path=tmp_path / ".findexarc")
    return SearchCommand(config=config)


def test_command_metadata(tmp_path):
    """The command describes itself for help listings."""
    command = _command(tmp_path)
    assert command.get_name() == "search"
    assert "/search <pattern>" in command.get_usage()
    assert command.get_description()


def test_parse_search_options(tmp_path):
    """Flags become option overrides and everything else is a path."""
    command = _command(tmp_path)
    parsed = command._parse_search_options(
        ["src", "--regex", "--whole-word", "--replace", "new", "docs", "--apply"]
    )

    assert parsed == {
        'paths': ["src", "docs"],
        'is_regex': True,
        'whole_word': True,
        'replacement': "new",
        'apply': True,
    }


def test_parse_negated_flags(tmp_path):
    """Negated flags switch a configured default off."""
    parsed = _command(tmp_path)._parse_search_options(
        ["--ignore-case", "--any-word", "--dot-stops-at-newline"]
    )

    assert parsed == {
        'paths': [],
        'case_sensitive': False,
        'whole_word': False,
        'dot_matches_newline': False,
    }


def test_execute_search(tmp_path):
    """Executing the command searches the given paths."""
    target = tmp_path / "notes.txt"
    target.write_text("TODO one\nTODO two\n")

    result = asyncio.run(_command(tmp_path).execute(["todo", str(target)]))

    assert result.success
    assert result.output.splitlines()[0] == 'Search "todo" (2 hits in 1 files)'
    assert result.metadata['report'].total_matches == 2
    assert result.warnings == []


def test_execute_replace_apply(tmp_path):
    """--replace with --apply writes the file and lists what changed."""
    target = tmp_path / "notes.txt"
    target.write_text("TODO one\nTODO two\n")

    result = asyncio.run(_command(tmp_path).execute(
        ["TODO", str(target), "--case-sensitive", "--replace", "DONE", "--apply"]
    ))

    assert result.success
    assert target.read_text() == "DONE one\nDONE two\n"
    assert result.output.splitlines()[-1] == f"Applied 2 replacements to {target}"


def test_execute_requires_pattern(tmp_path):
    """A bare /search is an error."""
    result = asyncio.run(_command(tmp_path).execute([]))
    assert not result.success
    assert result.error == "Search pattern required"


def test_run_rejects_apply_without_replace(tmp_path):
    """Applying needs a replacement."""
    command = _command(tmp_path)
    options = command.config.default_options("x")

    result = command.run(options, [tmp_path], apply=True)

    assert not result.success
    assert "--replace" in result.error


def test_run_reports_invalid_pattern(tmp_path):
    """Compile errors come back as a failed result."""
    (tmp_path / "a.txt").write_text("x")
    command = _command(tmp_path)
    options = command.config.default_options("(", is_regex=True)

    result = command.run(options, [tmp_path])

    assert not result.success
    assert "invalid pattern" in result.error


def test_run_collects_warnings(tmp_path):
    """Unreadable files produce warnings and a skipped count."""
    (tmp_path / "bad.txt").write_bytes(b"\xc3\x28")
    (tmp_path / "good.txt").write_text("needle")
    command = _command(tmp_path)

    result = command.run(command.config.default_options("needle"), [tmp_path])

    assert result.success
    assert result.metadata['skipped_files'] == 1
    assert result.warnings[0].startswith("warning: ")
    assert result.warnings[-1] == "1 files skipped"


def test_validate_args(tmp_path):
    """Slash arguments need a pattern, and --apply needs --replace."""
    command = _command(tmp_path)

    assert command.validate_args(["needle", "src"]) is None
    assert command.validate_args([""]) == "Search pattern required"
    assert command.validate_args(["needle", "--apply"]) == "--apply requires --replace"

    result = asyncio.run(command.execute(["needle", "--apply"]))
    assert result.exit_code == 1
