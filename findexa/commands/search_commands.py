"""
Search command for Findexa - find and replace across files and directories.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from ..config import Config
from ..error_handling import ErrorContext, ErrorManager
from ..search.errors import SearchError
from ..search.file_search import FileCollector, FileSearchInput
from ..search.options import SearchOptions
from ..search.pattern_matcher import PatternMatcher
from ..search.report import SearchReport
from ..search.search_engine import SearchEngine
from ..search.search_manager import SearchManager
from .base_command import BaseCommand, CommandResult

logger = logging.getLogger("findexa.commands.search")


class SearchCommand(BaseCommand):
    """Searches files, optionally planning or applying a replace-all."""

    def __init__(self,
                 config: Optional[Config] = None,
                 search_manager: Optional[SearchManager] = None,
                 error_manager: Optional[ErrorManager] = None):
        super().__init__()
        self.config = config or Config()
        self.search_manager = search_manager or SearchManager(
            engine=SearchEngine(PatternMatcher(
                guard_pathological=self.config.guard_pathological_patterns
            )),
            collector=FileCollector(
                ignore_patterns=self.config.ignore_patterns,
                max_file_size=self.config.max_file_size,
            ),
        )
        self.error_manager = error_manager

    def get_name(self) -> str:
        return "search"

    def get_description(self) -> str:
        return "Search files for a literal or regex pattern, with optional replace"

    def get_usage(self) -> str:
        return """
Usage: /search <pattern> [paths...] [options]

Options:
  --regex                Treat the pattern as a regular expression
  --case-sensitive       Match case exactly (--ignore-case to fold case)
  --whole-word           Only match whole words (--any-word to match anywhere)
  --dot-matches-newline  Let '.' match line breaks (--dot-stops-at-newline to stop)
  --replace <text>       Replacement text ($1 / ${name} for captures)
  --apply                Write replacements to disk (requires --replace)

Examples:
  /search TODO src                              # Find TODO comments
  /search "fn (\\w+)" --regex                    # Find function names
  /search old_name --whole-word --replace new_name --apply
        """

    async def execute(self, args: List[str], context: Dict[str, Any] = None) -> CommandResult:
        problem = self.validate_args(args)
        if problem:
            return CommandResult(success=False, error=problem)

        pattern = args[0]
        search_options = self._parse_search_options(args[1:])
        paths = search_options.pop('paths')
        replacement = search_options.pop('replacement', None)
        apply = search_options.pop('apply', False)

        options = self.config.default_options(pattern, wrap=False, **search_options)
        return self.run(options, paths, replacement=replacement, apply=apply)

    def _parse_search_options(self, args: List[str]) -> Dict[str, Any]:
        """Parse search command options; anything else is a path."""
        options: Dict[str, Any] = {'paths': []}
        i = 0

        while i < len(args):
            arg = args[i]

            if arg == '--regex':
                options['is_regex'] = True
                i += 1
            elif arg == '--case-sensitive':
                options['case_sensitive'] = True
                i += 1
            elif arg == '--ignore-case':
                options['case_sensitive'] = False
                i += 1
            elif arg == '--whole-word':
                options['whole_word'] = True
                i += 1
            elif arg == '--any-word':
                options['whole_word'] = False
                i += 1
            elif arg == '--dot-matches-newline':
                options['dot_matches_newline'] = True
                i += 1
            elif arg == '--dot-stops-at-newline':
                options['dot_matches_newline'] = False
                i += 1
            elif arg == '--replace' and i + 1 < len(args):
                options['replacement'] = args[i + 1]
                i += 2
            elif arg == '--apply':
                options['apply'] = True
                i += 1
            else:
                options['paths'].append(arg)
                i += 1

        return options

    def validate_args(self, args: List[str]) -> Optional[str]:
        if not args or not args[0]:
            return "Search pattern required"
        if "--apply" in args and "--replace" not in args:
            return "--apply requires --replace"
        return None

    def run(self,
            options: SearchOptions,
            paths: Iterable[Union[str, Path]],
            replacement: Optional[str] = None,
            apply: bool = False) -> CommandResult:
        """
        Search ``paths`` (the current directory when empty) and render the report.

        Standard output goes to ``CommandResult.output``; per-file warnings
        go to ``CommandResult.warnings``.
        """
        if apply and replacement is None:
            return CommandResult(success=False, error="--apply requires --replace")

        paths = list(paths) or [Path.cwd()]
        files = self.search_manager.collector.collect(paths)
        if not files:
            return CommandResult(success=True, output="No files to search.")

        logger.debug("Searching %d files for %r", len(files), options.pattern)
        try:
            if replacement is None:
                max_size = self.search_manager.collector.max_file_size
                report = self.search_manager.search_files(
                    (FileSearchInput.load(path, max_size) for path in files), options
                )
                applied = {}
            else:
                run = self.search_manager.replace_in_paths(files, options, replacement, apply=apply)
                report = run.report
                applied = run.applied
        except SearchError as e:
            if self.error_manager is not None:
                self.error_manager.handle_error(e, ErrorContext(operation="search", component="search_command"))
            return CommandResult(success=False, error=str(e))

        warnings = self._collect_warnings(report)
        metadata = {
            'report': report,
            'skipped_files': report.skipped_files,
            'applied': applied,
        }

        if report.is_empty:
            return CommandResult(success=True, output="No matches found.",
                                 warnings=warnings, metadata=metadata)

        lines = report.render_lines(options.pattern)
        if replacement is not None:
            if apply:
                for path, count in applied.items():
                    lines.append(f"Applied {count} replacements to {path}")
            else:
                lines.append("Dry run only; re-run with --apply to write changes.")

        return CommandResult(success=True, output="\n".join(lines),
                             warnings=warnings, metadata=metadata)

    @staticmethod
    def _collect_warnings(report: SearchReport) -> List[str]:
        warnings = [
            f"warning: {entry.label}: {entry.error}"
            for entry in report.results
            if entry.error is not None
        ]
        if warnings:
            warnings.append(f"{len(warnings)} files skipped")
        return warnings
