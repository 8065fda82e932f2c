"""Input validation and deletion safety checks for ClearCache."""

import os
from pathlib import Path

from .exceptions import PathNotFoundError, UnsafePathError

# Never deleted, whatever matches them
PROTECTED_PATHS = [
    "/",
    "/usr",
    "/bin",
    "/sbin",
    "/etc",
    "/var",
    "/home",
    "/root",
    "/boot",
    "/dev",
    "/proc",
    "/sys",
    "/tmp",
    "/Library",
    "/System",
    "/Applications",
    "/Users",
    "/Volumes",
]

MAX_PARALLEL_WORKERS = 256
MAX_DEPTH_LIMIT = 1000


def validate_directory_for_scanning(path: Path) -> None:
    """Validate that a directory is safe to scan.

    Args:
        path: Directory path to validate

    Raises:
        PathNotFoundError: If directory doesn't exist
        UnsafePathError: If directory is unsafe to scan

    """
    if not path.exists():
        raise PathNotFoundError(f"Directory does not exist: {path}")

    if not path.is_dir():
        raise UnsafePathError(f"Path is not a directory: {path}")

    # Check if we can read the directory
    if not os.access(path, os.R_OK | os.X_OK):
        raise UnsafePathError(f"Cannot read directory: {path}")


def validate_directory_for_deletion(path: Path) -> None:
    """Validate that a cache target is safe to delete.

    Args:
        path: File or directory about to be removed

    Raises:
        UnsafePathError: If the target is a protected or top-level path

    """
    path_str = str(path)
    if path_str in PROTECTED_PATHS:
        raise UnsafePathError(f"Cannot delete protected path: {path}")

    if path == Path.home():
        raise UnsafePathError(f"Cannot delete home directory: {path}")

    # Too close to the filesystem root
    if len(path.parts) < 3:
        raise UnsafePathError(f"Path is too close to the filesystem root: {path}")


def validate_parallel_workers(workers: int) -> None:
    """Validate a worker count.

    Args:
        workers: Number of worker threads

    Raises:
        ValueError: If the count is invalid

    """
    if not isinstance(workers, int):
        raise ValueError("Worker count must be an integer")

    if workers < 1:
        raise ValueError("Worker count must be positive")

    if workers > MAX_PARALLEL_WORKERS:
        raise ValueError(f"Worker count must be at most {MAX_PARALLEL_WORKERS}")


def validate_max_depth(depth: int) -> None:
    """Validate a traversal depth limit.

    Args:
        depth: Maximum depth below the root

    Raises:
        ValueError: If the depth is invalid

    """
    if not isinstance(depth, int):
        raise ValueError("Depth must be an integer")

    if depth < 1:
        raise ValueError("Depth must be positive")

    if depth > MAX_DEPTH_LIMIT:
        raise ValueError(f"Depth must be at most {MAX_DEPTH_LIMIT}")
