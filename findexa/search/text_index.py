"""
Offset bookkeeping for decoded text.

Public offsets are UTF-8 byte offsets while Python strings index by code
point, so every locate call goes through a ``TextIndex`` to translate between
the two and to map positions onto 1-based lines and columns.
"""

from bisect import bisect_left, bisect_right
from itertools import accumulate
from typing import List, Tuple

from .errors import InvalidScopeError


class TextIndex:
    """Line starts and byte/character offset translation for one text."""

    def __init__(self, text: str):
        self.text = text
        self.is_ascii = text.isascii()

        # _byte_offsets[i] is the UTF-8 offset of character i; the last entry is the total length.
        if self.is_ascii:
            self._byte_offsets: List[int] = []
            self.byte_length = len(text)
        else:
            self._byte_offsets = [0]
            self._byte_offsets.extend(
                accumulate(len(ch.encode("utf-8")) for ch in text)
            )
            self.byte_length = self._byte_offsets[-1]

        self._line_starts = [0]
        position = text.find("\n")
        while position != -1:
            self._line_starts.append(position + 1)
            position = text.find("\n", position + 1)

    def char_to_byte(self, index: int) -> int:
        if self.is_ascii:
            return index
        return self._byte_offsets[index]

    def byte_to_char(self, offset: int) -> int:
        """Translate a byte offset, rejecting offsets that split a character."""
        if not 0 <= offset <= self.byte_length:
            raise InvalidScopeError(offset, offset, self.byte_length, "offset out of range")
        if self.is_ascii:
            return offset
        index = bisect_left(self._byte_offsets, offset)
        if self._byte_offsets[index] != offset:
            raise InvalidScopeError(
                offset, offset, self.byte_length, "offset is not on a character boundary"
            )
        return index

    def byte_range_to_chars(self, start: int, end: int) -> Tuple[int, int]:
        try:
            return self.byte_to_char(start), self.byte_to_char(end)
        except InvalidScopeError as e:
            raise InvalidScopeError(start, end, self.byte_length, str(e)) from e

    def line_and_column(self, index: int) -> Tuple[int, int]:
        """1-based line and column (in code points) of character ``index``."""
        line_zero = bisect_right(self._line_starts, index) - 1
        column = index - self._line_starts[line_zero] + 1
        return line_zero + 1, column

    def line_text(self, line: int) -> str:
        """Text of a 1-based line without its newline."""
        start = self._line_starts[line - 1]
        if line < len(self._line_starts):
            end = self._line_starts[line] - 1
        else:
            end = len(self.text)
        return self.text[start:end]

    @property
    def line_count(self) -> int:
        return len(self._line_starts)
