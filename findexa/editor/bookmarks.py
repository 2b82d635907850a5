"""
Line bookmarks kept independently of search.
"""

from abc import ABC, abstractmethod
from bisect import bisect_left, bisect_right, insort
from typing import Iterator, List, Optional


class BookmarkStore(ABC):
    """Interface sessions use to set and clear line bookmarks."""

    @abstractmethod
    def set_bookmark(self, line: int) -> None:
        pass

    @abstractmethod
    def clear_bookmark(self, line: int) -> None:
        pass

    @abstractmethod
    def is_bookmarked(self, line: int) -> bool:
        pass


class BookmarkManager(BookmarkStore):
    """Sorted set of bookmarked 1-based line numbers."""

    def __init__(self, lines=None):
        self._lines: List[int] = sorted(set(lines or ()))

    def set_bookmark(self, line: int) -> None:
        self.add(line)

    def clear_bookmark(self, line: int) -> None:
        self.remove(line)

    def is_bookmarked(self, line: int) -> bool:
        pos = bisect_left(self._lines, line)
        return pos < len(self._lines) and self._lines[pos] == line

    def add(self, line: int) -> bool:
        """Insert a bookmark; False if it already existed."""
        if self.is_bookmarked(line):
            return False
        insort(self._lines, line)
        return True

    def remove(self, line: int) -> bool:
        """Remove a bookmark; False if there was none."""
        if not self.is_bookmarked(line):
            return False
        self._lines.remove(line)
        return True

    def toggle(self, line: int) -> bool:
        """Flip a bookmark and return the new state."""
        if self.remove(line):
            return False
        self.add(line)
        return True

    def next_after(self, line: int) -> Optional[int]:
        pos = bisect_right(self._lines, line)
        return self._lines[pos] if pos < len(self._lines) else None

    def previous_before(self, line: int) -> Optional[int]:
        pos = bisect_left(self._lines, line)
        return self._lines[pos - 1] if pos > 0 else None

    def clear(self) -> None:
        self._lines.clear()

    def __iter__(self) -> Iterator[int]:
        return iter(list(self._lines))

    def __len__(self) -> int:
        return len(self._lines)

    def __contains__(self, line: int) -> bool:
        return self.is_bookmarked(line)
