"""
Error handling and user guidance for Findexa.

Exceptions raised by the search core, the document layer and the file system
are classified, counted and rendered as rich panels with suggested next steps.
"""

import logging
import traceback
import zlib
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.panel import Panel

from ..editor.document import DocumentError
from ..search.errors import (
    CompileError,
    EmptyPatternError,
    InvalidReplacementError,
    InvalidScopeError,
    PathologicalPatternError,
)


class ErrorSeverity(Enum):
    """Error severity levels."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    """Error categories for better organization."""
    PATTERN = "pattern"
    SCOPE = "scope"
    DOCUMENT = "document"
    FILESYSTEM = "filesystem"
    CONFIGURATION = "configuration"
    UNKNOWN = "unknown"


@dataclass
class ErrorContext:
    """Context information for errors."""
    operation: str
    component: str
    user_action: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass
class UserGuidance:
    """User guidance information."""
    immediate_actions: List[str] = field(default_factory=list)
    troubleshooting_steps: List[str] = field(default_factory=list)
    prevention_tips: List[str] = field(default_factory=list)


@dataclass
class FindexaError:
    """Error record kept by the manager."""
    error_id: str
    severity: ErrorSeverity
    category: ErrorCategory
    message: str
    technical_details: str
    user_message: str
    context: ErrorContext
    guidance: UserGuidance
    occurrence_count: int = 1
    first_seen: datetime = field(default_factory=datetime.now)
    last_seen: datetime = field(default_factory=datetime.now)


class ErrorManager:
    """Classifies errors, tracks occurrences and shows guidance to the user."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console(stderr=True)
        self.logger = logging.getLogger("findexa.error_manager")

        self.error_history: Dict[str, FindexaError] = {}
        self.guidance_db: Dict[str, UserGuidance] = {}

        self._initialize_error_guidance()

    def handle_error(self,
                     exception: Exception,
                     context: ErrorContext,
                     display: bool = True) -> FindexaError:
        """Record, log and (optionally) display an error."""
        error = self._create_error_record(exception, context)
        self._log_error(error)
        if display:
            self._display_error(error)
        return error

    def _create_error_record(self, exception: Exception, context: ErrorContext) -> FindexaError:
        error_signature = f"{type(exception).__name__}:{context.component}:{context.operation}"
        error_id = f"FX-{zlib.crc32(error_signature.encode('utf-8')) % 10000:04d}"

        # Recurring errors only bump the counter
        if error_id in self.error_history:
            existing_error = self.error_history[error_id]
            existing_error.occurrence_count += 1
            existing_error.last_seen = datetime.now()
            existing_error.message = str(exception)
            existing_error.user_message = self._generate_user_message(exception, context)
            return existing_error

        category = self._categorize_error(exception, context)
        error = FindexaError(
            error_id=error_id,
            severity=self._assess_severity(exception),
            category=category,
            message=str(exception),
            technical_details="".join(
                traceback.format_exception(type(exception), exception, exception.__traceback__)
            ),
            user_message=self._generate_user_message(exception, context),
            context=context,
            guidance=self._get_guidance(category, exception),
        )
        self.error_history[error_id] = error
        return error

    def _categorize_error(self, exception: Exception, context: ErrorContext) -> ErrorCategory:
        if isinstance(exception, (CompileError, InvalidReplacementError)):
            return ErrorCategory.PATTERN
        if isinstance(exception, InvalidScopeError):
            return ErrorCategory.SCOPE
        if isinstance(exception, DocumentError):
            return ErrorCategory.DOCUMENT
        if isinstance(exception, OSError):
            return ErrorCategory.FILESYSTEM
        if "config" in context.component.lower():
            return ErrorCategory.CONFIGURATION
        return ErrorCategory.UNKNOWN

    def _assess_severity(self, exception: Exception) -> ErrorSeverity:
        if isinstance(exception, (CompileError, InvalidScopeError, InvalidReplacementError)):
            return ErrorSeverity.WARNING
        if isinstance(exception, PermissionError):
            return ErrorSeverity.CRITICAL
        return ErrorSeverity.ERROR

    def _generate_user_message(self, exception: Exception, context: ErrorContext) -> str:
        operation = context.operation
        if isinstance(exception, EmptyPatternError):
            return "Enter something to search for."
        if isinstance(exception, PathologicalPatternError):
            return f"The pattern '{exception.pattern}' could take forever to run; simplify its nested repetition."
        if isinstance(exception, CompileError):
            return f"The pattern could not be compiled during {operation}: {exception}"
        if isinstance(exception, PermissionError):
            return f"Permission denied during {operation}. Check file/directory permissions."
        if isinstance(exception, FileNotFoundError):
            return f"Required file not found during {operation}. File may have been moved or deleted."
        return f"An error occurred during {operation}: {exception}"

    def _get_guidance(self, category: ErrorCategory, exception: Exception) -> UserGuidance:
        guidance_key = f"{category.value}:{type(exception).__name__}"
        if guidance_key in self.guidance_db:
            return self.guidance_db[guidance_key]
        if category.value in self.guidance_db:
            return self.guidance_db[category.value]
        return UserGuidance(
            immediate_actions=["Check the error details above", "Try the operation again"],
            troubleshooting_steps=["Re-run with --verbose for debug logging"],
        )

    def _display_error(self, error: FindexaError):
        severity_styles = {
            ErrorSeverity.INFO: "blue",
            ErrorSeverity.WARNING: "yellow",
            ErrorSeverity.ERROR: "red",
            ErrorSeverity.CRITICAL: "bold red",
        }
        style = severity_styles.get(error.severity, "red")

        error_content = [
            f"[bold]{error.severity.value.upper()}: {error.user_message}[/bold]",
            f"\n[dim]Error ID: {error.error_id}[/dim]",
            f"[dim]Category: {error.category.value}[/dim]",
            f"[dim]Component: {error.context.component}[/dim]",
        ]
        if error.occurrence_count > 1:
            error_content.append(f"[dim]Occurrences: {error.occurrence_count}[/dim]")

        self.console.print(Panel("\n".join(error_content), title="Error Details", border_style=style))

        if error.guidance.immediate_actions:
            self._display_guidance_section("Immediate Actions", error.guidance.immediate_actions, "green")
        if error.guidance.troubleshooting_steps:
            self._display_guidance_section("Troubleshooting Steps", error.guidance.troubleshooting_steps, "yellow")

    def _display_guidance_section(self, title: str, items: List[str], color: str):
        content = [f"{i}. {item}" for i, item in enumerate(items, 1)]
        self.console.print(Panel("\n".join(content), title=title, border_style=color))

    def _log_error(self, error: FindexaError):
        log_level = {
            ErrorSeverity.INFO: logging.INFO,
            ErrorSeverity.WARNING: logging.WARNING,
            ErrorSeverity.ERROR: logging.ERROR,
            ErrorSeverity.CRITICAL: logging.CRITICAL,
        }.get(error.severity, logging.ERROR)

        self.logger.log(
            log_level,
            f"[{error.error_id}] {error.category.value}: {error.message} "
            f"(component: {error.context.component}, operation: {error.context.operation})"
        )

    @contextmanager
    def error_context(self, operation: str, component: str, **kwargs):
        """Context manager that records any escaping exception and re-raises it."""
        context = ErrorContext(operation=operation, component=component, **kwargs)
        try:
            yield context
        except Exception as e:
            self.handle_error(e, context)
            raise

    def get_error_statistics(self) -> Dict[str, Any]:
        category_counts: Dict[str, int] = {}
        severity_counts: Dict[str, int] = {}

        for error in self.error_history.values():
            category_counts[error.category.value] = category_counts.get(error.category.value, 0) + error.occurrence_count
            severity_counts[error.severity.value] = severity_counts.get(error.severity.value, 0) + error.occurrence_count

        return {
            "total_errors": len(self.error_history),
            "total_occurrences": sum(e.occurrence_count for e in self.error_history.values()),
            "category_breakdown": category_counts,
            "severity_breakdown": severity_counts,
        }

    def _initialize_error_guidance(self):
        """Initialize built-in error guidance."""
        self.guidance_db["pattern"] = UserGuidance(
            immediate_actions=[
                "Check the pattern syntax",
                "Drop --regex to search for the text literally",
            ],
            troubleshooting_steps=[
                "Escape regex metacharacters such as ( [ . * +",
                "Reference only capture groups that exist in the pattern",
            ],
            prevention_tips=["Test complex expressions on a small file first"],
        )

        self.guidance_db["pattern:PathologicalPatternError"] = UserGuidance(
            immediate_actions=[
                "Rewrite nested repetition such as (a+)+ as a single quantifier",
            ],
            troubleshooting_steps=[
                "Set guard_pathological_patterns: false in ~/.findexarc to disable the check",
            ],
        )

        self.guidance_db["scope"] = UserGuidance(
            immediate_actions=["Select a range inside the document and search again"],
            troubleshooting_steps=["Selection bounds must lie on character boundaries"],
        )

        self.guidance_db["document"] = UserGuidance(
            immediate_actions=[
                "Check that the file is text in UTF-8 or UTF-16",
                "Make sure the file is not open read-only elsewhere",
            ],
            troubleshooting_steps=["Re-run the search to refresh stale results"],
        )

        self.guidance_db["filesystem"] = UserGuidance(
            immediate_actions=["Check that the path exists and is readable"],
            troubleshooting_steps=["Verify file and directory permissions"],
        )

        self.guidance_db["configuration"] = UserGuidance(
            immediate_actions=["Run `findexa config` to view the effective settings"],
            troubleshooting_steps=["Regenerate ~/.findexarc with `findexa setup`"],
        )
