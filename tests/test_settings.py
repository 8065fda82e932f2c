"""Tests for settings module."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from clearcache.exceptions import ConfigurationError
from clearcache.settings import (
    CONFIG_FILENAME,
    create_sample_config,
    get_config_path,
    load_config,
)


class TestLoadConfig:
    """Tests for load_config."""

    def test_missing_file_gives_defaults(self, tmp_path):
        """Test defaults when no file exists."""
        config = load_config(tmp_path / CONFIG_FILENAME)

        assert config.traversal.max_depth == 20
        assert config.traversal.use_ignore_file is True
        assert config.traversal.respect_gitignore is False
        assert config.clean.cache_types == "all"
        assert config.clean.include_libraries is False
        assert config.clean.parallel_workers == (os.cpu_count() or 1)

    def test_partial_file(self, tmp_path):
        """Test that missing keys keep their defaults."""
        path = tmp_path / CONFIG_FILENAME
        path.write_text('[clean]\ncache_types = "python,node"\n\n[traversal]\nmax_depth = 5\n')

        config = load_config(path)

        assert config.clean.cache_types == "python,node"
        assert config.clean.include_libraries is False
        assert config.traversal.max_depth == 5
        assert config.traversal.follow_symlinks is False

    def test_invalid_toml(self, tmp_path):
        """Test that broken files raise ConfigurationError."""
        path = tmp_path / CONFIG_FILENAME
        path.write_text("[clean\nbroken")

        with pytest.raises(ConfigurationError, match="Failed to load config"):
            load_config(path)

    def test_wrong_type(self, tmp_path):
        """Test that values of the wrong type are rejected."""
        path = tmp_path / CONFIG_FILENAME
        path.write_text("[traversal]\nmax_depth = true\n")

        with pytest.raises(ConfigurationError, match="'max_depth' must be an integer"):
            load_config(path)

        path.write_text('[clean]\ninclude_libraries = "yes"\n')
        with pytest.raises(ConfigurationError, match="'include_libraries' must be of type bool"):
            load_config(path)


class TestSampleConfig:
    """Tests for create_sample_config."""

    def test_sample_config_is_valid(self, tmp_path):
        """Test that the sample file parses."""
        path = tmp_path / CONFIG_FILENAME
        create_sample_config(path)

        config = load_config(path)

        assert config.clean.parallel_workers == 4
        assert config.traversal.use_ignore_file is True


class TestGetConfigPath:
    """Tests for get_config_path."""

    def test_prefers_local_file(self, tmp_path, monkeypatch):
        """Test that a config in the working directory wins."""
        monkeypatch.chdir(tmp_path)
        (tmp_path / CONFIG_FILENAME).write_text("")
        assert get_config_path() == tmp_path / CONFIG_FILENAME

    def test_falls_back_to_home(self, tmp_path, monkeypatch):
        """Test the home directory default."""
        monkeypatch.chdir(tmp_path)
        home = tmp_path / "home"
        home.mkdir()
        with patch("clearcache.settings.Path.home", return_value=home):
            assert get_config_path() == home / CONFIG_FILENAME
