"""Unified exception hierarchy for boxshell.

All custom exceptions inherit from BoxshellError for consistent error handling.
The CLI catches these and prints them as fatal command failures.

Dependency direction:
    This module has NO internal dependencies (leaf module).
    It may be imported by: all other boxshell modules.
    It should NOT import from any other boxshell modules.
"""

from __future__ import annotations


class BoxshellError(Exception):
    """Base exception for all boxshell errors."""


class ConfigError(BoxshellError):
    """Configuration-related errors.

    Examples:
        - Missing or unparsable boxshell.json
        - Wrong value types in the configuration
        - SSH auth socket path without a usable directory
    """


class ValidationError(BoxshellError):
    """A docker command was rejected before any process was spawned."""


class CommandConsumedError(ValidationError):
    """Raised when a command builder is reused after it has been run."""


class MissingEnvVarError(BoxshellError):
    """A host environment variable required by a forwarder is not set."""

    def __init__(self, name: str) -> None:
        super().__init__(f"environment variable {name} is not set")
        self.name = name


class ForwardError(BoxshellError):
    """A forwarder found its host environment value but could not use it."""


class DockerError(BoxshellError):
    """Docker operation errors.

    Base class for all Docker-related exceptions.
    """


class LaunchError(DockerError):
    """Raised when the docker binary could not be spawned."""


class WaitError(DockerError):
    """Raised when waiting on a spawned docker process failed."""


class DockerNotFoundError(DockerError):
    """Raised when Docker is not installed or not in PATH."""


class DockerTimeoutError(DockerError):
    """Raised when a Docker operation times out."""


class CollaboratorError(BoxshellError):
    """Failure reported by a nested-runtime launcher.

    Forwarders propagate these unchanged; the launcher owns the diagnostic.
    """


class DindError(CollaboratorError):
    """Raised when the docker-in-docker helper cannot be checked or started."""
