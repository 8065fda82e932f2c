"""Turn discovered cache items into deletions."""

import logging
import os
import shutil
import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from .config import CacheCategory, CacheSignature, select_signatures
from .docker import clean_docker_caches
from .exceptions import ClearCacheError, DeletionError, DockerError
from .scanner import DiscoveredItem, Patterns, TraversalConfig, find_cache_items, get_dir_size
from .validation import validate_directory_for_deletion

logger = logging.getLogger(__name__)


@dataclass
class CleanTask:
    """One path to measure and delete."""

    path: Path
    signature: CacheSignature
    category: CacheCategory


@dataclass
class RunResult:
    """Outcome of a cleaning run."""

    directories_cleaned: int = 0
    files_deleted: int = 0
    bytes_freed: int = 0
    errors: List[str] = field(default_factory=list)
    duration_seconds: float = 0.0

    @property
    def size_gb(self) -> float:
        return self.bytes_freed / (1024 ** 3)

    @property
    def size_human(self) -> str:
        if self.bytes_freed >= 1024 ** 3:
            return f"{self.size_gb:.1f} GB"
        if self.bytes_freed >= 1024 ** 2:
            return f"{self.bytes_freed / (1024 ** 2):.1f} MB"
        if self.bytes_freed >= 1024:
            return f"{self.bytes_freed / 1024:.1f} KB"
        return f"{self.bytes_freed} B"


class SharedCounter:
    """Integer total updated by several worker threads."""

    def __init__(self, value: int = 0) -> None:
        self._value = value
        self._lock = threading.Lock()

    def add(self, amount: int) -> None:
        with self._lock:
            self._value += amount

    @property
    def value(self) -> int:
        with self._lock:
            return self._value


def build_tasks(
    items: List[DiscoveredItem],
    patterns: Optional[Patterns] = None,
    root: Optional[Path] = None,
) -> Tuple[List[CleanTask], List[CleanTask]]:
    """Convert discovered items into tasks, split into (docker_tasks, file_tasks).

    Command-only signatures (Docker) never match a path, so one task rooted
    at ``root`` is added for each of them that is active.
    """
    docker_tasks: List[CleanTask] = []
    file_tasks: List[CleanTask] = []

    for item in items:
        task = CleanTask(path=item.path, signature=item.signature, category=item.category)
        if item.category is CacheCategory.DOCKER:
            docker_tasks.append(task)
        else:
            file_tasks.append(task)

    if patterns and root is not None:
        for category, signature in patterns:
            if signature.is_command_only:
                docker_tasks.append(CleanTask(path=root, signature=signature, category=category))

    return docker_tasks, file_tasks


def chunk_tasks(tasks: List[CleanTask], workers: int) -> List[List[CleanTask]]:
    """Split tasks into contiguous chunks of ``max(1, len(tasks) // workers)``."""
    chunk_size = max(1, len(tasks) // max(1, workers))
    return [tasks[i : i + chunk_size] for i in range(0, len(tasks), chunk_size)]


def clean_item(task: CleanTask, dry_run: bool = False) -> Tuple[int, int]:
    """Measure and delete one target.

    Args:
        task: Target to clean
        dry_run: Measure only

    Returns:
        (files, bytes) removed, or that would be removed

    Raises:
        UnsafePathError: If the target fails the deletion safety checks
        ScanError: If the target cannot be measured
        DeletionError: If the target cannot be removed
        OSError: If the target's metadata cannot be read

    """
    path = task.path

    # Already gone, e.g. removed together with a matching parent
    if not os.path.lexists(path):
        return 0, 0

    validate_directory_for_deletion(path)

    is_dir = path.is_dir() and not path.is_symlink()
    if is_dir:
        files, size = get_dir_size(path)
    else:
        files, size = 1, path.lstat().st_size

    if dry_run:
        return files, size

    try:
        if is_dir:
            shutil.rmtree(path)
        else:
            path.unlink()
    except FileNotFoundError:
        return 0, 0
    except OSError as e:
        raise DeletionError(str(e), path=str(path), error_code=type(e).__name__) from e

    logger.info("Deleted %s (%s)", path, task.signature.description)
    return files, size


def process_chunk(
    tasks: List[CleanTask],
    total_bytes: SharedCounter,
    total_files: SharedCounter,
    dry_run: bool = False,
) -> Tuple[int, List[str]]:
    """Clean a slice of tasks one after another.

    A failing task is recorded and the rest of the chunk still runs.

    Returns:
        (tasks cleaned, error messages)

    """
    cleaned = 0
    errors: List[str] = []

    for task in tasks:
        library = " [LIBRARY]" if task.signature.is_library else ""
        logger.debug("Processing: %s (%s%s)", task.path, task.signature.description, library)

        try:
            files, size = clean_item(task, dry_run=dry_run)
        except (OSError, ClearCacheError) as e:
            logger.warning("Failed to clean %s: %s", task.path, e)
            errors.append(f"Failed to clean {task.path}: {e}")
            continue

        cleaned += 1
        total_files.add(files)
        total_bytes.add(size)
        if dry_run:
            logger.info("Would delete: %s (%d files, %d bytes%s)", task.path, files, size, library)

    return cleaned, errors


def execute_tasks(
    tasks: List[CleanTask],
    total_bytes: SharedCounter,
    total_files: SharedCounter,
    workers: int,
    dry_run: bool = False,
) -> Tuple[int, List[str]]:
    """Run file tasks in parallel, one worker per chunk.

    Returns:
        (tasks cleaned, error messages)

    """
    chunks = chunk_tasks(tasks, workers)
    if not chunks:
        return 0, []

    cleaned = 0
    errors: List[str] = []

    with ThreadPoolExecutor(max_workers=len(chunks)) as executor:
        futures = [
            executor.submit(process_chunk, chunk, total_bytes, total_files, dry_run)
            for chunk in chunks
        ]
        for future in as_completed(futures):
            chunk_cleaned, chunk_errors = future.result()
            cleaned += chunk_cleaned
            errors.extend(chunk_errors)

    return cleaned, errors


class CacheCleaner:
    """Finds and removes cache artifacts below a root directory."""

    def __init__(
        self,
        root_directory: Path,
        cache_types: List[CacheCategory],
        parallel_threads: Optional[int] = None,
        recursive: bool = True,
        dry_run: bool = False,
        include_libraries: bool = False,
        no_ignore: bool = False,
        respect_gitignore: bool = False,
        max_depth: int = 20,
        follow_symlinks: bool = False,
    ) -> None:
        self.root_directory = root_directory
        self.cache_types = cache_types
        self.parallel_threads = parallel_threads or os.cpu_count() or 1
        self.recursive = recursive
        self.dry_run = dry_run
        self.include_libraries = include_libraries
        self.no_ignore = no_ignore
        self.respect_gitignore = respect_gitignore
        self.max_depth = max_depth
        self.follow_symlinks = follow_symlinks

    def collect_patterns(self) -> Patterns:
        """Active (category, signature) pairs for this run."""
        return select_signatures(self.cache_types, include_libraries=self.include_libraries)

    def traversal_config(self) -> TraversalConfig:
        # Cache dirs usually sit in .gitignore, so it is only honored on request
        return TraversalConfig(
            max_depth=self.max_depth if self.recursive else 1,
            follow_symlinks=self.follow_symlinks,
            include_hidden=True,
            respect_gitignore=self.respect_gitignore,
            respect_ignore_file=not self.no_ignore,
            parallel=self.parallel_threads > 1,
            workers=self.parallel_threads,
        )

    def find_tasks(self) -> Tuple[List[CleanTask], List[CleanTask]]:
        """Run discovery to completion and return (docker_tasks, file_tasks)."""
        patterns = self.collect_patterns()
        items = find_cache_items(self.root_directory, self.traversal_config(), patterns)
        return build_tasks(items, patterns, self.root_directory)

    def clean(self, total_bytes: SharedCounter, total_files: SharedCounter) -> RunResult:
        """Discover then clean.

        Args:
            total_bytes: Running total of bytes freed, shared with the caller
            total_files: Running total of files deleted, shared with the caller

        Returns:
            RunResult with counts and every per-task or Docker error

        """
        start = time.monotonic()
        docker_tasks, file_tasks = self.find_tasks()
        logger.info(
            "Found %d cache items to clean", len(docker_tasks) + len(file_tasks)
        )

        if not docker_tasks and not file_tasks:
            return RunResult(duration_seconds=time.monotonic() - start)

        result = RunResult()

        if docker_tasks:
            try:
                clean_docker_caches(dry_run=self.dry_run)
                result.directories_cleaned += 1
            except DockerError as e:
                logger.warning("Docker cleaning failed: %s", e)
                result.errors.append(f"Docker cleaning failed: {e}")

        if file_tasks:
            cleaned, errors = execute_tasks(
                file_tasks,
                total_bytes,
                total_files,
                workers=self.parallel_threads,
                dry_run=self.dry_run,
            )
            result.directories_cleaned += cleaned
            result.errors.extend(errors)

        result.files_deleted = total_files.value
        result.bytes_freed = total_bytes.value
        result.duration_seconds = time.monotonic() - start
        return result


def run_clean(root_directory: Path, cache_types: List[CacheCategory], **options) -> RunResult:
    """Run a cleaner with fresh counters."""
    cleaner = CacheCleaner(root_directory, cache_types, **options)
    return cleaner.clean(SharedCounter(), SharedCounter())
