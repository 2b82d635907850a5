"""
Text documents as seen by the search core.

The core only needs ``contents``, ``apply_edit`` and ``save``; ``TextDocument``
is the file-backed implementation used by the CLI. It decodes on open,
normalises newlines to ``\\n`` and writes back with the original encoding,
byte-order mark and line-ending style.
"""

import codecs
import logging
import os
from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from ..search.errors import InvalidScopeError
from ..search.text_index import TextIndex

logger = logging.getLogger("findexa.editor.document")


class DocumentError(Exception):
    """Reading, decoding, encoding or writing a document failed."""


class LineEnding(Enum):
    LF = "\n"
    CRLF = "\r\n"
    CR = "\r"


class Encoding(Enum):
    UTF8 = "utf-8"
    UTF16_LE = "utf-16-le"
    UTF16_BE = "utf-16-be"


_BOMS = {
    Encoding.UTF8: codecs.BOM_UTF8,
    Encoding.UTF16_LE: codecs.BOM_UTF16_LE,
    Encoding.UTF16_BE: codecs.BOM_UTF16_BE,
}


class Document(ABC):
    """Interface the search session edits through."""

    @abstractmethod
    def contents(self) -> str:
        """Current decoded text."""
        pass

    @abstractmethod
    def apply_edit(self, start: int, end: int, text: str) -> None:
        """Replace the UTF-8 byte range ``[start, end)`` with ``text``."""
        pass

    @abstractmethod
    def save(self) -> None:
        """Persist the contents without altering encoding metadata."""
        pass


class TextDocument(Document):
    """In-memory text optionally backed by a file on disk."""

    def __init__(self,
                 text: str = "",
                 path: Optional[Union[str, Path]] = None,
                 encoding: Encoding = Encoding.UTF8,
                 has_bom: bool = False,
                 line_ending: LineEnding = LineEnding.LF):
        self.path = Path(path) if path is not None else None
        self.encoding = encoding
        self.has_bom = has_bom
        self.line_ending = line_ending
        self.is_dirty = False
        self._text = text

    @classmethod
    def open(cls, path: Union[str, Path]) -> "TextDocument":
        """Load and decode a file."""
        path = Path(path)
        try:
            data = path.read_bytes()
        except OSError as e:
            raise DocumentError(f"cannot read {path}: {e}") from e

        encoding, has_bom = _detect_encoding(data)
        payload = data[len(_BOMS[encoding]):] if has_bom else data
        try:
            raw = payload.decode(encoding.value)
        except UnicodeDecodeError as e:
            raise DocumentError(f"{path} is not valid {encoding.value} text: {e.reason}") from e

        line_ending = _detect_line_ending(raw)
        text = raw.replace("\r\n", "\n").replace("\r", "\n")
        logger.debug(
            "Opened %s (%s, bom=%s, %s)", path, encoding.value, has_bom, line_ending.name
        )
        return cls(text, path, encoding, has_bom, line_ending)

    def contents(self) -> str:
        return self._text

    def set_contents(self, text: str) -> None:
        self._text = text
        self.is_dirty = True

    def apply_edit(self, start: int, end: int, text: str) -> None:
        index = TextIndex(self._text)
        if not 0 <= start <= end <= index.byte_length:
            raise InvalidScopeError(start, end, index.byte_length)
        char_start, char_end = index.byte_range_to_chars(start, end)
        self.set_contents(self._text[:char_start] + text + self._text[char_end:])

    def save(self) -> None:
        if self.path is None:
            raise DocumentError("document has no associated path")
        self.save_as(self.path)

    def save_as(self, path: Union[str, Path]) -> None:
        """Encode and write through a temporary file, then rename over the target."""
        path = Path(path)
        payload = self.encode()
        tmp_path = path.with_name(path.name + ".findexa-tmp")
        try:
            with open(tmp_path, "wb") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, path)
        except OSError as e:
            if tmp_path.exists():
                tmp_path.unlink()
            raise DocumentError(f"cannot write {path}: {e}") from e

        self.path = path
        self.is_dirty = False
        logger.info("Saved %s", path)

    def encode(self) -> bytes:
        text = self._text
        if self.line_ending != LineEnding.LF:
            text = text.replace("\n", self.line_ending.value)
        try:
            data = text.encode(self.encoding.value)
        except UnicodeEncodeError as e:
            raise DocumentError(
                f"text cannot be represented in {self.encoding.value}: {e.reason}"
            ) from e
        return _BOMS[self.encoding] + data if self.has_bom else data


def _detect_encoding(data: bytes):
    if data.startswith(codecs.BOM_UTF8):
        return Encoding.UTF8, True
    if data.startswith(codecs.BOM_UTF16_LE):
        return Encoding.UTF16_LE, True
    if data.startswith(codecs.BOM_UTF16_BE):
        return Encoding.UTF16_BE, True
    return Encoding.UTF8, False


def _detect_line_ending(text: str) -> LineEnding:
    crlf = text.count("\r\n")
    lone_cr = text.count("\r") - crlf
    lone_lf = text.count("\n") - crlf
    if crlf and crlf >= lone_lf and crlf >= lone_cr:
        return LineEnding.CRLF
    if lone_cr > lone_lf:
        return LineEnding.CR
    return LineEnding.LF
