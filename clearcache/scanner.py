"""Walk development trees and find cache artifacts."""

import fnmatch
import logging
import os
import threading
from concurrent.futures import FIRST_COMPLETED, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from .config import CacheCategory, CacheSignature
from .exceptions import ScanError
from .ignore import IgnoreRules

logger = logging.getLogger(__name__)

Patterns = List[Tuple[CacheCategory, CacheSignature]]

GLOB_CHARS = ("*", "?", "[")


class TraversalStrategy(str, Enum):
    """How the tree is walked."""

    RAW = "raw"  # No ignore files, single thread
    SEQUENTIAL = "sequential"  # Ignore-aware, single thread
    PARALLEL = "parallel"  # Ignore-aware, worker pool


@dataclass
class TraversalConfig:
    """Settings for one traversal pass."""

    max_depth: int = 20
    follow_symlinks: bool = False
    include_hidden: bool = True
    respect_gitignore: bool = False
    respect_ignore_file: bool = True
    parallel: bool = True
    workers: int = field(default_factory=lambda: os.cpu_count() or 1)

    @property
    def strategy(self) -> TraversalStrategy:
        if not (self.respect_ignore_file or self.respect_gitignore):
            return TraversalStrategy.RAW
        if self.parallel:
            return TraversalStrategy.PARALLEL
        return TraversalStrategy.SEQUENTIAL


@dataclass
class DiscoveredItem:
    """A cache artifact found on disk."""

    path: Path
    signature: CacheSignature
    category: CacheCategory
    size_bytes: int
    is_directory: bool


def matches_rule(path: Path, rule: str) -> bool:
    """Check a single match rule against a path.

    Glob rules are anchored to the whole base name, rules with a ``/`` must
    equal the trailing components of the path, anything else must equal the
    base name.
    """
    if any(char in rule for char in GLOB_CHARS):
        return fnmatch.fnmatchcase(path.name, rule)
    if "/" in rule:
        parts = tuple(part for part in rule.split("/") if part)
        return len(path.parts) >= len(parts) and path.parts[-len(parts):] == parts
    return path.name == rule


def matches_signature(path: Path, signature: CacheSignature) -> bool:
    """Check if any rule of a signature matches the path."""
    return any(matches_rule(path, rule) for rule in signature.patterns)


def match_entry(path: Path, patterns: Patterns) -> Optional[Tuple[CacheCategory, CacheSignature]]:
    """Return the first (category, signature) pair matching the path."""
    for category, signature in patterns:
        if matches_signature(path, signature):
            return category, signature
    return None


def canonical_path(path: Path, keep_link: bool = False) -> Path:
    """Resolve a path, falling back to the path as given.

    Args:
        path: Path to resolve
        keep_link: Resolve only the parent so a symlink stays a symlink

    """
    try:
        if keep_link:
            return path.parent.resolve(strict=True) / path.name
        return path.resolve(strict=True)
    except (OSError, RuntimeError):
        return path


class _SeenPaths:
    """Canonical paths already reported or descended into."""

    def __init__(self) -> None:
        self._paths: set[Path] = set()
        self._lock = threading.Lock()

    def add(self, path: Path) -> bool:
        """Record a path; return False if it was already there."""
        with self._lock:
            if path in self._paths:
                return False
            self._paths.add(path)
            return True


class _Collector:
    """Lock-protected result list shared by walk workers."""

    def __init__(self) -> None:
        self._items: list[DiscoveredItem] = []
        self._lock = threading.Lock()

    def add(self, item: DiscoveredItem) -> None:
        with self._lock:
            self._items.append(item)

    def items(self) -> list[DiscoveredItem]:
        with self._lock:
            return list(self._items)


@dataclass
class _Visit:
    """A directory waiting to be scanned."""

    path: Path
    depth: int
    rules: Optional[IgnoreRules] = None


def _scan_directory(
    visit: _Visit,
    config: TraversalConfig,
    patterns: Patterns,
    seen: _SeenPaths,
    root: Path,
    emit: Callable[[DiscoveredItem], None],
) -> list[_Visit]:
    """Scan one directory, report its matches and return the subdirectories to walk."""
    rules = visit.rules.descend(visit.path) if visit.rules is not None else None
    depth = visit.depth + 1
    children: list[_Visit] = []

    try:
        with os.scandir(visit.path) as it:
            entries = sorted(it, key=lambda e: e.name)
    except OSError as e:
        logger.debug("Skipping unreadable directory %s: %s", visit.path, e)
        return children

    for entry in entries:
        if not config.include_hidden and entry.name.startswith("."):
            continue

        path = Path(entry.path)
        try:
            is_link = entry.is_symlink()
            is_dir = entry.is_dir(follow_symlinks=config.follow_symlinks)
        except OSError as e:
            logger.debug("Skipping unreadable entry %s: %s", path, e)
            continue

        if rules is not None and rules.is_ignored(path, is_dir):
            logger.debug("Ignored by ignore file: %s", path)
            continue

        canonical = canonical_path(path, keep_link=is_link and not config.follow_symlinks)
        if not seen.add(canonical):
            continue

        match = match_entry(path, patterns)
        if match is not None:
            # A followed link may point anywhere; only targets inside the root are cleaned
            if config.follow_symlinks and not canonical.is_relative_to(root):
                logger.debug("Skipping %s: resolves outside %s", path, root)
                continue
            category, signature = match
            try:
                size = entry.stat(follow_symlinks=config.follow_symlinks).st_size
            except OSError:
                size = 0
            emit(
                DiscoveredItem(
                    path=canonical_path(path, keep_link=True) if is_link else canonical,
                    signature=signature,
                    category=category,
                    size_bytes=size,
                    is_directory=is_dir,
                )
            )
            # The whole directory goes, so its contents need no separate match
            continue

        if is_dir and depth < config.max_depth:
            children.append(_Visit(path, depth, rules))

    return children


def _start(
    root: Path, with_rules: bool, config: TraversalConfig
) -> Tuple[_Visit, _SeenPaths, Path]:
    seen = _SeenPaths()
    canonical_root = canonical_path(root)
    seen.add(canonical_root)
    rules = None
    if with_rules:
        rules = IgnoreRules.from_policy(config.respect_ignore_file, config.respect_gitignore)
    return _Visit(root, 0, rules), seen, canonical_root


def _walk_sequential(
    root: Path, config: TraversalConfig, patterns: Patterns, with_rules: bool
) -> list[DiscoveredItem]:
    found: list[DiscoveredItem] = []
    first, seen, canonical_root = _start(root, with_rules, config)
    stack = [first]
    while stack:
        visit = stack.pop()
        children = _scan_directory(visit, config, patterns, seen, canonical_root, found.append)
        stack.extend(reversed(children))
    return found


def walk_raw(root: Path, config: TraversalConfig, patterns: Patterns) -> list[DiscoveredItem]:
    """Single-threaded walk that never reads ignore files."""
    return _walk_sequential(root, config, patterns, with_rules=False)


def walk_ignore_sequential(
    root: Path, config: TraversalConfig, patterns: Patterns
) -> list[DiscoveredItem]:
    """Single-threaded walk honoring ignore files."""
    return _walk_sequential(root, config, patterns, with_rules=True)


def walk_ignore_parallel(
    root: Path, config: TraversalConfig, patterns: Patterns
) -> list[DiscoveredItem]:
    """Walk honoring ignore files with a pool of directory-scanning workers.

    Every directory is one job; a finished job submits its subdirectories.
    Discovery order is not deterministic.
    """
    collector = _Collector()
    first, seen, canonical_root = _start(root, True, config)

    with ThreadPoolExecutor(max_workers=max(1, config.workers)) as executor:
        def submit(visit: _Visit):
            return executor.submit(
                _scan_directory, visit, config, patterns, seen, canonical_root, collector.add
            )

        pending = {submit(first)}
        while pending:
            done, pending = wait(pending, return_when=FIRST_COMPLETED)
            for future in done:
                for child in future.result():
                    pending.add(submit(child))

    return collector.items()


STRATEGIES: dict[TraversalStrategy, Callable[[Path, TraversalConfig, Patterns], list[DiscoveredItem]]] = {
    TraversalStrategy.RAW: walk_raw,
    TraversalStrategy.SEQUENTIAL: walk_ignore_sequential,
    TraversalStrategy.PARALLEL: walk_ignore_parallel,
}


def find_cache_items(
    root: Path, config: TraversalConfig, patterns: Patterns
) -> list[DiscoveredItem]:
    """Find every cache artifact under ``root``.

    Args:
        root: Directory to walk (not itself reported)
        config: Traversal settings; they also pick the strategy
        patterns: Ordered (category, signature) pairs, first match wins

    Returns:
        Discovered items, each canonical path at most once

    """
    strategy = config.strategy
    logger.debug("Scanning %s with %s traversal (max depth %d)", root, strategy.value, config.max_depth)
    items = STRATEGIES[strategy](root, config, patterns)
    logger.debug("Found %d cache items under %s", len(items), root)
    return items


def get_dir_size(path: Path) -> Tuple[int, int]:
    """Count the regular files below a directory and their total size.

    Symlinks are not followed.

    Args:
        path: Directory to measure

    Returns:
        (file_count, size_bytes)

    Raises:
        ScanError: If a directory below ``path`` cannot be listed

    """
    file_count = 0
    total_size = 0
    stack = [path]

    try:
        while stack:
            current = stack.pop()
            with os.scandir(current) as it:
                for entry in it:
                    if entry.is_dir(follow_symlinks=False):
                        stack.append(Path(entry.path))
                    elif entry.is_file(follow_symlinks=False):
                        try:
                            total_size += entry.stat(follow_symlinks=False).st_size
                        except OSError:
                            continue
                        file_count += 1
    except OSError as e:
        raise ScanError(f"Error measuring directory size for {path}: {e}") from e

    return file_count, total_size
