"""
Base command class for Findexa commands.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class CommandResult:
    """Result of command execution."""
    success: bool
    output: Optional[str] = None
    error: Optional[str] = None
    warnings: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def exit_code(self) -> int:
        return 0 if self.success else 1


class BaseCommand(ABC):
    """Base class for slash-style commands that also back the CLI."""

    @abstractmethod
    def get_name(self) -> str:
        """Get the command name."""
        pass

    @abstractmethod
    def get_description(self) -> str:
        """Get the command description."""
        pass

    def get_usage(self) -> str:
        """Get command usage information."""
        return f"Usage: /{self.get_name()}"

    def help_text(self) -> str:
        return f"{self.get_description()}\n{self.get_usage()}"

    @abstractmethod
    async def execute(self, args: List[str], context: Dict[str, Any] = None) -> CommandResult:
        """Execute the command."""
        pass

    def validate_args(self, args: List[str]) -> Optional[str]:
        """Validate command arguments. Return error message if invalid, None if valid."""
        return None
