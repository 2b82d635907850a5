"""Tests for Findexa configuration."""

import os
import tempfile
import pytest
from pathlib import Path
from unittest.mock import patch

import yaml

from findexa.config import Config


def test_config_initialization(tmp_path):
    """Test that Config initializes properly."""
    with patch.dict(os.environ, {}, clear=True):
        config = Config(config_path=tmp_path / ".findexarc")
        assert config.search_defaults == {
            "case_sensitive": False,
            "whole_word": False,
            "dot_matches_newline": False,
            "wrap": True,
        }
        assert config.ignore_patterns == []
        assert config.max_file_size is None
        assert config.guard_pathological_patterns is True
        assert config.log_level == "WARNING"


def test_config_reads_user_file(tmp_path):
    """Test that values in the YAML config file are picked up."""
    config_path = tmp_path / ".findexarc"
    config_path.write_text(yaml.dump({
        "search": {"whole_word": True, "wrap": False},
        "files": {"ignore_patterns": ["*.log"], "max_file_size": 2048},
        "guard_pathological_patterns": False,
        "log_level": "debug",
    }))

    with patch.dict(os.environ, {}, clear=True):
        config = Config(config_path=config_path)

    assert config.search_defaults["whole_word"] is True
    assert config.search_defaults["wrap"] is False
    assert config.ignore_patterns == ["*.log"]
    assert config.max_file_size == 2048
    assert config.guard_pathological_patterns is False
    assert config.log_level == "DEBUG"


def test_config_parses_quoted_booleans(tmp_path):
    """Quoted YAML booleans read the same way as FINDEXA_* overrides."""
    config_path = tmp_path / ".findexarc"
    config_path.write_text(
        'search:\n  case_sensitive: "false"\n  whole_word: "yes"\n'
        'guard_pathological_patterns: "off"\n'
    )

    with patch.dict(os.environ, {}, clear=True):
        config = Config(config_path=config_path)

    assert config.search_defaults["case_sensitive"] is False
    assert config.search_defaults["whole_word"] is True
    assert config.search_defaults["wrap"] is True
    assert config.guard_pathological_patterns is False


def test_config_with_env_vars(tmp_path):
    """Test configuration with environment variables."""
    env = {
        "FINDEXA_CASE_SENSITIVE": "true",
        "FINDEXA_MAX_FILE_SIZE": "100",
        "FINDEXA_LOG_LEVEL": "info",
    }
    with patch.dict(os.environ, env, clear=True):
        config = Config(config_path=tmp_path / ".findexarc")
        assert config.search_defaults["case_sensitive"] is True
        assert config.max_file_size == 100
        assert config.get_log_level() == 20


def test_config_with_invalid_yaml(tmp_path):
    """Test that an unreadable config file falls back to defaults."""
    config_path = tmp_path / ".findexarc"
    config_path.write_text("search: [unclosed\n")

    with patch.dict(os.environ, {}, clear=True):
        config = Config(config_path=config_path)

    assert config.user_config == {}
    assert config.search_defaults["case_sensitive"] is False


def test_default_options_overrides(tmp_path):
    """Test building search options from defaults and explicit overrides."""
    with patch.dict(os.environ, {}, clear=True):
        config = Config(config_path=tmp_path / ".findexarc")

    options = config.default_options("needle", is_regex=True, whole_word=None, wrap=False)
    assert options.pattern == "needle"
    assert options.is_regex is True
    assert options.whole_word is False
    assert options.wrap is False


def test_create_default_config():
    """Test creating default configuration file."""
    with tempfile.TemporaryDirectory() as temp_dir:
        config_path = Path(temp_dir) / ".findexarc"

        with patch("pathlib.Path.home", return_value=Path(temp_dir)):
            config = Config()
            config.create_default_config()

            assert config_path.exists()

            # Verify content
            with open(config_path, 'r') as f:
                content = yaml.safe_load(f)

            assert content["search"]["wrap"] is True
            assert "ignore_patterns" in content["files"]
            assert content["log_level"] == "WARNING"


def test_as_dict(tmp_path):
    """Test the effective settings dictionary shown by `findexa config`."""
    with patch.dict(os.environ, {}, clear=True):
        config = Config(config_path=tmp_path / ".findexarc")

    settings = config.as_dict()
    assert set(settings) == {"search", "files", "guard_pathological_patterns", "log_level"}
    assert settings["files"]["max_file_size"] is None
