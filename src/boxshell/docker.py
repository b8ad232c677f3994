"""Docker operations for boxshell.

Short, non-interactive docker calls used around the main session:
daemon checks, image pulls and helper container management.
"""

from __future__ import annotations

import os
import subprocess
from typing import TYPE_CHECKING

from .constants import DOCKER_BINARY, DOCKER_BINARY_ENV, DOCKER_COMMAND_TIMEOUT, DOCKER_PULL_TIMEOUT
from .errors import DockerNotFoundError, DockerTimeoutError
from .logging import get_logger

logger = get_logger(__name__)

if TYPE_CHECKING:
    from collections.abc import Sequence

__all__ = [
    "get_docker_binary",
    "safe_docker_run",
    "check_docker_status",
    "kill_container",
    "pull_image",
]


def get_docker_binary() -> str:
    """Return the docker executable, honouring BOXSHELL_DOCKER."""
    return os.environ.get(DOCKER_BINARY_ENV) or DOCKER_BINARY


def safe_docker_run(
    args: Sequence[str],
    *,
    timeout: int = DOCKER_COMMAND_TIMEOUT,
    capture_output: bool = True,
) -> subprocess.CompletedProcess[str]:
    """Run a docker subcommand with consistent error handling.

    Args:
        args: Arguments after the docker binary (e.g. ["info"]).
        timeout: Command timeout in seconds.
        capture_output: Capture stdout/stderr if True.

    Returns:
        CompletedProcess with command result.

    Raises:
        DockerNotFoundError: If the docker binary is not found.
        DockerTimeoutError: If the command times out.
    """
    cmd = [get_docker_binary(), *args]
    cmd_str = " ".join(cmd[:4]) + ("..." if len(cmd) > 4 else "")
    logger.debug("Running Docker command: %s", cmd_str)
    try:
        result = subprocess.run(
            cmd,
            capture_output=capture_output,
            text=True,
            check=False,
            timeout=timeout,
        )
    except FileNotFoundError as e:
        logger.error("Docker not found in PATH: %s", cmd_str)
        raise DockerNotFoundError(f"Docker not found in PATH. Command: {cmd_str}") from e
    except subprocess.TimeoutExpired as e:
        logger.error("Docker command timed out after %ds: %s", timeout, cmd_str)
        raise DockerTimeoutError(
            f"Docker command timed out after {timeout}s. Command: {cmd_str}"
        ) from e
    logger.debug("Docker command completed: exit=%d", result.returncode)
    return result


def check_docker_status() -> bool:
    """Check if the Docker daemon is responsive."""
    try:
        result = safe_docker_run(["info"])
        return result.returncode == 0
    except (DockerNotFoundError, DockerTimeoutError):
        return False


def kill_container(name: str) -> bool:
    """Kill a running container.

    Returns:
        True if docker reported success, False otherwise.
    """
    try:
        result = safe_docker_run(["kill", name])
        return result.returncode == 0
    except (DockerNotFoundError, DockerTimeoutError):
        return False


def pull_image(image: str) -> int:
    """Pull an image with progress shown on the terminal.

    Returns:
        Exit status of docker pull.
    """
    result = safe_docker_run(["pull", image], timeout=DOCKER_PULL_TIMEOUT, capture_output=False)
    return result.returncode
