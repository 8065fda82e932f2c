"""Configuration management for ClearCache."""

import os
from dataclasses import dataclass, field
from pathlib import Path

import toml

from .exceptions import ConfigurationError

CONFIG_FILENAME = ".clearcache.toml"


@dataclass
class TraversalSettings:
    """Settings for directory traversal."""

    max_depth: int = 20
    follow_symlinks: bool = False
    respect_gitignore: bool = False
    use_ignore_file: bool = True


@dataclass
class CleanSettings:
    """Settings for the cleaning phase."""

    cache_types: str = "all"
    parallel_workers: int = field(default_factory=lambda: os.cpu_count() or 1)
    include_libraries: bool = False


@dataclass
class ClearCacheConfig:
    """Main configuration for ClearCache."""

    traversal: TraversalSettings = field(default_factory=TraversalSettings)
    clean: CleanSettings = field(default_factory=CleanSettings)


def get_config_path() -> Path:
    """Get the path to the configuration file."""
    # Check for config in current directory first
    local_config = Path.cwd() / CONFIG_FILENAME
    if local_config.exists():
        return local_config

    # Then check user's home directory
    home_config = Path.home() / CONFIG_FILENAME
    if home_config.exists():
        return home_config

    # Return default location if none exists
    return home_config


def _checked(section: dict, key: str, default, expected_type: type):
    value = section.get(key, default)
    # bool is an int subclass; keep them apart
    if expected_type is int and isinstance(value, bool):
        raise ConfigurationError(f"'{key}' must be an integer")
    if not isinstance(value, expected_type):
        raise ConfigurationError(f"'{key}' must be of type {expected_type.__name__}")
    return value


def load_config(config_path: Path | None = None) -> ClearCacheConfig:
    """Load configuration from file.

    Args:
        config_path: Path to config file. If None, uses default locations.

    Returns:
        ClearCacheConfig instance

    Raises:
        ConfigurationError: If config file exists but is invalid

    """
    if config_path is None:
        config_path = get_config_path()

    # Start with defaults
    config = ClearCacheConfig()

    if not config_path.exists():
        return config

    try:
        with open(config_path, encoding="utf-8") as f:
            data = toml.load(f)
    except (OSError, toml.TomlDecodeError) as e:
        raise ConfigurationError(f"Failed to load config from {config_path}: {e}") from e

    if "traversal" in data:
        section = data["traversal"]
        defaults = config.traversal
        config.traversal = TraversalSettings(
            max_depth=_checked(section, "max_depth", defaults.max_depth, int),
            follow_symlinks=_checked(section, "follow_symlinks", defaults.follow_symlinks, bool),
            respect_gitignore=_checked(
                section, "respect_gitignore", defaults.respect_gitignore, bool
            ),
            use_ignore_file=_checked(section, "use_ignore_file", defaults.use_ignore_file, bool),
        )

    if "clean" in data:
        section = data["clean"]
        defaults = config.clean
        config.clean = CleanSettings(
            cache_types=_checked(section, "cache_types", defaults.cache_types, str),
            parallel_workers=_checked(
                section, "parallel_workers", defaults.parallel_workers, int
            ),
            include_libraries=_checked(
                section, "include_libraries", defaults.include_libraries, bool
            ),
        )

    return config


SAMPLE_CONFIG = """# ClearCache Configuration File

[traversal]
# Maximum directory depth below the target directory
max_depth = 20

# Follow symbolic links while walking (cycles are detected)
follow_symlinks = false

# Skip paths listed in .gitignore files
respect_gitignore = false

# Skip paths listed in .clearcacheignore files
use_ignore_file = true

[clean]
# Comma-separated cache types: node, rust, go, python, docker, general, or "all"
cache_types = "all"

# Number of worker threads
parallel_workers = 4

# Also remove dependency caches that need reinstalling (node_modules, target, ...)
include_libraries = false
"""


def create_sample_config(config_path: Path | None = None) -> None:
    """Create a sample configuration file.

    Args:
        config_path: Path to save sample config. If None, uses default location.

    """
    if config_path is None:
        config_path = Path.home() / CONFIG_FILENAME

    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w", encoding="utf-8") as f:
            f.write(SAMPLE_CONFIG)
    except OSError as e:
        raise ConfigurationError(f"Failed to create sample config at {config_path}: {e}") from e
