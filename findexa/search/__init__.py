"""
Search core for Findexa - pattern compilation, match location, reports,
multi-file orchestration and per-document search sessions.
"""

from .errors import (
    SearchError,
    CompileError,
    EmptyPatternError,
    InvalidPatternError,
    PathologicalPatternError,
    InvalidScopeError,
    InvalidReplacementError,
)
from .options import SearchOptions, SearchScope, SearchDirection
from .pattern_matcher import PatternMatcher, Matcher, compile_pattern
from .match_locator import SearchMatch, locate
from .report import FileSearchResult, SearchReport, SearchSummary, MarkSummary, format_report
from .search_engine import SearchEngine, ReplaceAllOutcome, search, replace_all, find
from .file_search import FileCollector, FileSearchInput
from .search_manager import SearchManager, ReplaceRun, search_in_files
from .search_session import (
    SearchSession,
    SessionState,
    NavigationResult,
    NavigationStatus,
    ReplaceResult,
    ReplaceStatus,
)

__all__ = [
    'SearchError',
    'CompileError',
    'EmptyPatternError',
    'InvalidPatternError',
    'PathologicalPatternError',
    'InvalidScopeError',
    'InvalidReplacementError',
    'SearchOptions',
    'SearchScope',
    'SearchDirection',
    'PatternMatcher',
    'Matcher',
    'compile_pattern',
    'SearchMatch',
    'locate',
    'FileSearchResult',
    'SearchReport',
    'SearchSummary',
    'MarkSummary',
    'format_report',
    'SearchEngine',
    'ReplaceAllOutcome',
    'search',
    'replace_all',
    'find',
    'FileCollector',
    'FileSearchInput',
    'SearchManager',
    'ReplaceRun',
    'search_in_files',
    'SearchSession',
    'SessionState',
    'NavigationResult',
    'NavigationStatus',
    'ReplaceResult',
    'ReplaceStatus',
]
