"""
Error handling and user guidance system for Findexa.
"""

from .error_manager import (
    ErrorManager,
    ErrorSeverity,
    ErrorCategory,
    ErrorContext,
    UserGuidance,
    FindexaError
)

__all__ = [
    "ErrorManager",
    "ErrorSeverity",
    "ErrorCategory",
    "ErrorContext",
    "UserGuidance",
    "FindexaError"
]
