"""
Search options shared by the engine, the orchestrator and sessions.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional, Tuple

from .errors import InvalidScopeError


class SearchDirection(Enum):
    """Direction used by Find Next / Find Previous style navigation."""
    FORWARD = "forward"
    BACKWARD = "backward"


@dataclass(frozen=True)
class SearchScope:
    """Byte range a search may touch; no bounds means the whole document."""
    start: Optional[int] = None
    end: Optional[int] = None

    @classmethod
    def whole_document(cls) -> "SearchScope":
        return cls()

    @classmethod
    def selection(cls, start: int, end: int) -> "SearchScope":
        return cls(start=start, end=end)

    @property
    def is_whole_document(self) -> bool:
        return self.start is None and self.end is None

    def resolve(self, length: int) -> Tuple[int, int]:
        """
        Return the concrete ``(start, end)`` byte range for a text of ``length`` bytes.

        Out-of-range or inverted bounds are rejected; they are never clamped.
        """
        if self.is_whole_document:
            return 0, length

        start, end = self.start, self.end
        if start is None or end is None:
            raise InvalidScopeError(start, end, length, "both bounds are required")
        if not 0 <= start <= end <= length:
            raise InvalidScopeError(start, end, length)
        return start, end


@dataclass(frozen=True)
class SearchOptions:
    """Immutable configuration for one search."""
    pattern: str
    is_regex: bool = False
    case_sensitive: bool = False
    whole_word: bool = False
    dot_matches_newline: bool = False
    direction: SearchDirection = SearchDirection.FORWARD
    scope: SearchScope = field(default_factory=SearchScope)
    wrap: bool = True

    def with_changes(self, **changes) -> "SearchOptions":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    def whole_document(self) -> "SearchOptions":
        if self.scope.is_whole_document:
            return self
        return replace(self, scope=SearchScope.whole_document())
