"""
Slash command system for Findexa.
"""

from .base_command import BaseCommand, CommandResult
from .search_commands import SearchCommand

__all__ = [
    "BaseCommand",
    "CommandResult",
    "SearchCommand"
]
