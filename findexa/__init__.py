"""
Findexa - search-and-replace engine for text editors

Literal and regex search over documents and file sets, search-in-results,
pure replace planning and bookmark-aware search sessions.
"""

__version__ = "1.0.1"
__author__ = "Mike"
__description__ = "Search-and-replace engine for text editors"

from .search import SearchEngine, SearchOptions, SearchSession, search_in_files

__all__ = ["SearchEngine", "SearchOptions", "SearchSession", "search_in_files"]
