"""Ignore-file handling (.clearcacheignore and .gitignore)."""

import logging
from dataclasses import dataclass, replace
from pathlib import Path

import pathspec

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

IGNORE_FILENAME = ".clearcacheignore"
GITIGNORE_FILENAME = ".gitignore"


DEFAULT_IGNORE_CONTENT = """# ClearCache ignore patterns
# This file uses the same syntax as .gitignore
# Patterns here will be excluded from cache cleaning

# Version control directories
.git/
.svn/
.hg/
.bzr/

# IDE and editor directories
.vscode/
.idea/
*.swp
*.swo
*~

# OS generated files
.DS_Store
.DS_Store?
._*
.Spotlight-V100
.Trashes
ehthumbs.db
Thumbs.db

# Important project files
package.json
package-lock.json
yarn.lock
pnpm-lock.yaml
Cargo.toml
go.mod
go.sum
requirements.txt
pyproject.toml
setup.py
Makefile
CMakeLists.txt

# Documentation
README*
LICENSE*
CHANGELOG*
CONTRIBUTING*
docs/
doc/

# Source code (be careful with these)
src/
lib/
include/

# Configuration files
config/
conf/
settings/
"""


@dataclass(frozen=True)
class IgnoreRules:
    """Stack of ignore specs collected on the way down from the root.

    Each layer holds the directory its ignore file lives in, so patterns
    are matched relative to that directory the way git does.
    """

    filenames: tuple[str, ...] = (IGNORE_FILENAME,)
    layers: tuple[tuple[Path, pathspec.PathSpec], ...] = ()

    @classmethod
    def from_policy(cls, use_ignore_file: bool, respect_gitignore: bool) -> "IgnoreRules":
        """Create an empty rule stack that will read the selected ignore files."""
        filenames: list[str] = []
        if use_ignore_file:
            filenames.append(IGNORE_FILENAME)
        if respect_gitignore:
            filenames.append(GITIGNORE_FILENAME)
        return cls(filenames=tuple(filenames))

    def descend(self, directory: Path) -> "IgnoreRules":
        """Return the rules in effect inside ``directory``.

        Args:
            directory: Directory about to be scanned

        Returns:
            This stack, extended with any ignore files found in ``directory``

        """
        new_layers = []
        for name in self.filenames:
            try:
                text = (directory / name).read_text(encoding="utf-8", errors="replace")
            except FileNotFoundError:
                continue
            except OSError as e:
                logger.debug("Cannot read ignore file %s: %s", directory / name, e)
                continue
            spec = pathspec.GitIgnoreSpec.from_lines(text.splitlines())
            new_layers.append((directory, spec))

        if not new_layers:
            return self
        return replace(self, layers=self.layers + tuple(new_layers))

    def is_ignored(self, path: Path, is_dir: bool = False) -> bool:
        """Check a path against every layer that applies to it."""
        for base, spec in self.layers:
            try:
                relative = path.relative_to(base).as_posix()
            except ValueError:
                continue
            if is_dir:
                relative += "/"
            if spec.match_file(relative):
                return True
        return False


def create_default_ignore_content() -> str:
    """Return the default .clearcacheignore template."""
    return DEFAULT_IGNORE_CONTENT


def write_default_ignore_file(directory: Path, force: bool = False) -> Path:
    """Write the default ignore template into ``directory``.

    Args:
        directory: Directory that receives the ignore file
        force: Overwrite an existing file

    Returns:
        Path of the written file

    Raises:
        ConfigurationError: If the file exists and ``force`` is False, or
            it cannot be written

    """
    target = directory / IGNORE_FILENAME
    if target.exists() and not force:
        raise ConfigurationError(f"Ignore file already exists: {target}")

    try:
        target.write_text(create_default_ignore_content(), encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Failed to write ignore file {target}: {e}") from e

    logger.info("Wrote ignore template to %s", target)
    return target
