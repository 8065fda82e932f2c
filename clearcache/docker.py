"""Docker cache cleanup through the Docker CLI."""

import logging
import subprocess

from .exceptions import DockerCommandError, DockerUnavailableError

logger = logging.getLogger(__name__)

DOCKER_PRUNE_COMMANDS: list[list[str]] = [
    ["docker", "system", "prune", "-af"],
    ["docker", "volume", "prune", "-f"],
]


def check_command_exists(command: str) -> bool:
    """Check if a command/tool is installed."""
    # Extract just the binary name from "binary --version" style commands
    binary = command.split()[0]
    try:
        result = subprocess.run(
            ["which", binary],
            capture_output=True,
            timeout=5,
        )
    except (OSError, subprocess.SubprocessError):
        return False
    return result.returncode == 0


def is_docker_available() -> bool:
    """Check that the Docker CLI is installed and the daemon answers."""
    if not check_command_exists("docker"):
        return False
    try:
        result = subprocess.run(
            ["docker", "info"],
            capture_output=True,
            text=True,
        )
    except OSError:
        return False
    return result.returncode == 0


def clean_docker_caches(dry_run: bool = False) -> list[str]:
    """Prune Docker containers, images, build cache and volumes.

    Runs ``docker system prune -af`` then ``docker volume prune -f``. The
    calls block without a timeout.

    Args:
        dry_run: Only describe the commands

    Returns:
        The command lines that were (or would be) run

    Raises:
        DockerUnavailableError: If Docker cannot be reached
        DockerCommandError: If a prune command fails; later commands are skipped

    """
    command_lines = [" ".join(command) for command in DOCKER_PRUNE_COMMANDS]

    if dry_run:
        for line in command_lines:
            logger.info("Would run: %s", line)
        return command_lines

    if not is_docker_available():
        raise DockerUnavailableError("Docker is not available")

    for command in DOCKER_PRUNE_COMMANDS:
        logger.debug("Running: %s", " ".join(command))
        try:
            result = subprocess.run(command, capture_output=True, text=True)
        except OSError as e:
            raise DockerUnavailableError(f"Cannot run {' '.join(command)}: {e}") from e

        if result.returncode != 0:
            raise DockerCommandError(
                f"{' '.join(command[:3])} failed: {result.stderr.strip()}",
                command=command,
                returncode=result.returncode,
            )

    logger.info("Docker caches cleaned successfully")
    return command_lines
