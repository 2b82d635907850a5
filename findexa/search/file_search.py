"""
File enumeration for multi-file searches: expands paths into files and loads
them as search inputs.
"""

import fnmatch
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Set, Union

from ..editor.document import DocumentError, TextDocument

logger = logging.getLogger("findexa.search.file_search")

DEFAULT_IGNORE_PATTERNS = {
    # Version control
    '.git/**', '.svn/**', '.hg/**', '.bzr/**',
    # Dependencies and build output
    'node_modules/**', 'venv/**', '.venv/**', 'target/**', 'build/**', 'dist/**',
    '__pycache__/**', '.pytest_cache/**', '.tox/**',
    # IDE/Editor
    '.vscode/**', '.idea/**', '*.swp', '*.swo', '*~',
    '.DS_Store', 'Thumbs.db',
    # Compiled files
    '*.pyc', '*.pyo', '*.class', '*.o', '*.so',
    '*.dylib', '*.dll', '*.exe',
}


@dataclass
class FileSearchInput:
    """One file handed to the orchestrator; ``contents`` is None when it could not be read."""
    path: Path
    contents: Optional[str]
    error: Optional[str] = None

    @classmethod
    def load(cls, path: Union[str, Path], max_file_size: Optional[int] = None) -> "FileSearchInput":
        """Read and decode ``path``; failures become an input carrying the error."""
        path = Path(path)
        try:
            if max_file_size is not None and path.stat().st_size > max_file_size:
                return cls(path, None, f"larger than {max_file_size} bytes")
            return cls(path, TextDocument.open(path).contents())
        except (DocumentError, OSError) as e:
            return cls(path, None, str(e))


class FileCollector:
    """Expands files and directories into a sorted list of files to search."""

    def __init__(self,
                 ignore_patterns: Optional[Iterable[str]] = None,
                 include_hidden: bool = False,
                 max_file_size: Optional[int] = None):
        self.ignore_patterns: Set[str] = set(DEFAULT_IGNORE_PATTERNS)
        if ignore_patterns:
            self.ignore_patterns.update(ignore_patterns)
        self.include_hidden = include_hidden
        self.max_file_size = max_file_size

    def collect(self, paths: Iterable[Union[str, Path]]) -> List[Path]:
        """
        Expand ``paths`` into files.

        Files given explicitly are always kept; directories are walked
        recursively, skipping hidden and ignored entries. Missing paths are
        logged and skipped.
        """
        files = []
        for raw in paths:
            path = Path(raw)
            if path.is_file():
                files.append(path)
            elif path.is_dir():
                files.extend(self._walk(path))
            else:
                logger.warning("%s does not exist", path)
        return files

    def load_inputs(self, paths: Iterable[Union[str, Path]]) -> Iterator[FileSearchInput]:
        for path in self.collect(paths):
            search_input = FileSearchInput.load(path, self.max_file_size)
            if search_input.error:
                logger.warning("%s: %s", path, search_input.error)
            yield search_input

    def _walk(self, base: Path) -> List[Path]:
        results = []
        for root, dirs, files in os.walk(base):
            root_path = Path(root)
            dirs[:] = sorted(
                d for d in dirs
                if (self.include_hidden or not d.startswith('.')) and
                not self._should_ignore_path(root_path / d, base)
            )
            for file_name in sorted(files):
                if not self.include_hidden and file_name.startswith('.'):
                    continue
                file_path = root_path / file_name
                if self._should_ignore_path(file_path, base):
                    continue
                results.append(file_path)
        return results

    def _should_ignore_path(self, path: Path, base: Path) -> bool:
        try:
            relative_path = path.relative_to(base).as_posix()
        except ValueError:
            relative_path = path.as_posix()
        if path.is_dir():
            relative_path += "/"

        for pattern in self.ignore_patterns:
            if pattern.endswith("/**"):
                prefix = pattern[:-2]
                if relative_path.startswith(prefix) or path.name + "/" == prefix:
                    return True
            elif fnmatch.fnmatch(relative_path, pattern) or fnmatch.fnmatch(path.name, pattern):
                return True
        return False
