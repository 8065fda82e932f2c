"""Custom exceptions for ClearCache."""


class ClearCacheError(Exception):
    """Base exception for ClearCache operations."""

    pass


class ScanError(ClearCacheError):
    """Error during directory traversal or size measurement."""

    pass


class PathNotFoundError(ClearCacheError):
    """Error when a specified path does not exist."""

    pass


class UnsafePathError(ClearCacheError):
    """Error when attempting to operate on a protected/unsafe path."""

    pass


class ConfigurationError(ClearCacheError):
    """Error in configuration file, settings or cache type selection."""

    pass


class DeletionError(ClearCacheError):
    """Error during file/directory deletion."""

    def __init__(self, message: str, path: str, error_code: str | None = None) -> None:
        super().__init__(message)
        self.path = path
        self.error_code = error_code


class DockerError(ClearCacheError):
    """Base error for container runtime cleanup."""

    pass


class DockerUnavailableError(DockerError):
    """Error when the Docker CLI or daemon cannot be reached."""

    pass


class DockerCommandError(DockerError):
    """Error when a Docker prune command exits with a non-zero status."""

    def __init__(self, message: str, command: list[str], returncode: int) -> None:
        super().__init__(message)
        self.command = command
        self.returncode = returncode
