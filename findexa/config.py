"""Configuration management for Findexa."""

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from dotenv import load_dotenv

from .search.options import SearchOptions

_TRUE_VALUES = {"1", "true", "yes", "on"}


class Config:
    """Configuration manager for Findexa."""

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        """Initialize configuration with environment variables and the user config file."""
        # Load environment variables from .env file if it exists
        load_dotenv()

        self.config_path = Path(config_path) if config_path else Path.home() / ".findexarc"

        # Default configuration
        self.default_search = {
            "case_sensitive": False,
            "whole_word": False,
            "dot_matches_newline": False,
            "wrap": True,
        }
        self.default_log_level = "WARNING"

        # Load user config if it exists
        self.user_config = self._load_user_config()

        search_config = self.user_config.get("search", {}) or {}
        self.search_defaults = {
            key: self._parse_bool(search_config.get(key), value)
            for key, value in self.default_search.items()
        }
        env_case = os.getenv("FINDEXA_CASE_SENSITIVE")
        if env_case is not None:
            self.search_defaults["case_sensitive"] = self._parse_bool(env_case, False)

        files_config = self.user_config.get("files", {}) or {}
        self.ignore_patterns: List[str] = list(files_config.get("ignore_patterns", []) or [])
        self.max_file_size = self._parse_size(
            os.getenv("FINDEXA_MAX_FILE_SIZE", files_config.get("max_file_size"))
        )

        self.guard_pathological_patterns = self._parse_bool(
            self.user_config.get("guard_pathological_patterns"), True
        )
        self.log_level = str(
            os.getenv("FINDEXA_LOG_LEVEL", self.user_config.get("log_level", self.default_log_level))
        ).upper()

    def _load_user_config(self) -> Dict:
        """Load user configuration from ~/.findexarc if it exists."""
        if self.config_path.exists():
            try:
                with open(self.config_path, 'r') as f:
                    loaded = yaml.safe_load(f) or {}
                return loaded if isinstance(loaded, dict) else {}
            except (OSError, yaml.YAMLError) as e:
                logging.getLogger("findexa.config").warning(
                    "Ignoring unreadable config %s: %s", self.config_path, e
                )
                return {}
        return {}

    @staticmethod
    def _parse_bool(value: Any, default: bool) -> bool:
        if value is None:
            return default
        if isinstance(value, str):
            return value.strip().lower() in _TRUE_VALUES
        return bool(value)

    @staticmethod
    def _parse_size(value: Any) -> Optional[int]:
        if value in (None, ""):
            return None
        try:
            return int(value)
        except (TypeError, ValueError):
            return None

    def get_log_level(self) -> int:
        return getattr(logging, self.log_level, logging.WARNING)

    def default_options(self, pattern: str, **overrides) -> SearchOptions:
        """Build search options from the configured defaults plus explicit overrides."""
        values = dict(self.search_defaults)
        values.update({key: value for key, value in overrides.items() if value is not None})
        return SearchOptions(pattern=pattern, **values)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "search": dict(self.search_defaults),
            "files": {
                "ignore_patterns": list(self.ignore_patterns),
                "max_file_size": self.max_file_size,
            },
            "guard_pathological_patterns": self.guard_pathological_patterns,
            "log_level": self.log_level,
        }

    def create_default_config(self) -> None:
        """Create a default .findexarc file for the user."""
        default_config = {
            "search": dict(self.default_search),
            "files": {
                "ignore_patterns": ["*.min.js", "*.lock"],
                "max_file_size": 10 * 1024 * 1024,
            },
            "guard_pathological_patterns": True,
            "log_level": self.default_log_level,
        }

        with open(self.config_path, 'w') as f:
            yaml.dump(default_config, f, default_flow_style=False)
