"""
Editor collaborators used by the search core: documents and bookmarks.
"""

from .document import Document, TextDocument, DocumentError, Encoding, LineEnding
from .bookmarks import BookmarkStore, BookmarkManager

__all__ = [
    "Document",
    "TextDocument",
    "DocumentError",
    "Encoding",
    "LineEnding",
    "BookmarkStore",
    "BookmarkManager",
]
