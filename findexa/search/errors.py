"""
Error types raised by the Findexa search core.
"""

from typing import Optional


class SearchError(Exception):
    """Base class for every failure raised by the search core."""


class CompileError(SearchError):
    """A pattern could not be turned into a matcher."""

    def __init__(self, message: str, pattern: str = ""):
        super().__init__(message)
        self.pattern = pattern


class EmptyPatternError(CompileError):
    """The search pattern is empty."""

    def __init__(self):
        super().__init__("search pattern cannot be empty", "")


class InvalidPatternError(CompileError):
    """A regular expression failed to parse."""

    def __init__(self, pattern: str, reason: str):
        super().__init__(f"invalid pattern '{pattern}': {reason}", pattern)
        self.reason = reason


class PathologicalPatternError(CompileError):
    """A regular expression is likely to backtrack catastrophically."""

    def __init__(self, pattern: str):
        super().__init__(
            f"pattern '{pattern}' nests unbounded quantifiers and may never finish",
            pattern
        )


class InvalidScopeError(SearchError):
    """Scope bounds fall outside the target text or are inverted."""

    def __init__(self, start: Optional[int], end: Optional[int], length: int, reason: str = ""):
        detail = reason or "expected 0 <= start <= end <= length"
        super().__init__(
            f"invalid scope [{start}, {end}) for text of {length} bytes: {detail}"
        )
        self.start = start
        self.end = end
        self.length = length


class InvalidReplacementError(SearchError):
    """A replacement template references a group that does not exist."""

    def __init__(self, replacement: str, reason: str):
        super().__init__(f"invalid replacement '{replacement}': {reason}")
        self.replacement = replacement
        self.reason = reason
