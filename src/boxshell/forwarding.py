"""Forwarders exposing host resources inside the container.

Each forwarder takes a DockerCommandBuilder and returns a new one with the
volumes, environment entries or switches it needs. A failing forwarder
raises and leaves the builder it was given untouched. Applying the same
forwarder twice duplicates its entries; callers apply each at most once.
"""

from __future__ import annotations

import os
from pathlib import PurePosixPath
from typing import TYPE_CHECKING, Protocol

from .constants import (
    CONTAINER_TMUX_DIR,
    DIND_ALIAS,
    DIND_PORT,
    DOCKER_HOST_ENV,
    SSH_AUTH_SOCK_ENV,
    TMUX_ENV,
    TMUX_SOCKET_ENV,
)
from .errors import ConfigError, ForwardError, MissingEnvVarError
from .logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Mapping

    from .command import DockerCommandBuilder

logger = get_logger(__name__)


class NestedRuntime(Protocol):
    """What enable_docker_in_docker needs from a nested-runtime launcher."""

    name: str

    def preflight(self) -> None: ...

    def launch(self) -> None: ...


def _require_env(name: str, environ: Mapping[str, str] | None) -> str:
    env = os.environ if environ is None else environ
    try:
        value = env[name]
    except KeyError:
        raise MissingEnvVarError(name) from None
    logger.debug("Got %s=%s", name, value)
    return value


def _socket_dir(path: PurePosixPath) -> str | None:
    """Return the directory holding a socket, or None if there is none."""
    parent = path.parent
    if parent == path or str(parent) == ".":
        return None
    return str(parent)


def enable_forward_ssh_agent(
    command: DockerCommandBuilder,
    environ: Mapping[str, str] | None = None,
) -> DockerCommandBuilder:
    """Forward the host SSH agent into the container.

    The agent's directory is mounted at the same path inside the container
    and SSH_AUTH_SOCK is passed through unchanged. Mounting the directory
    rather than the socket lets the agent recreate its socket.

    Raises:
        MissingEnvVarError: SSH_AUTH_SOCK is not set.
        ConfigError: the socket path has no usable directory.
    """
    agent_socket = _require_env(SSH_AUTH_SOCK_ENV, environ)
    directory = _socket_dir(PurePosixPath(agent_socket))
    if directory is None:
        raise ConfigError("no SSH auth socket directory")
    return command.add_environment((SSH_AUTH_SOCK_ENV, agent_socket)).add_volume(
        (directory, directory)
    )


def enable_forward_tmux_socket(
    command: DockerCommandBuilder,
    environ: Mapping[str, str] | None = None,
) -> DockerCommandBuilder:
    """Forward the host tmux server socket into the container.

    TMUX holds "socket_path,pid,session". The socket's directory is mounted
    at a fixed container path and TMUX_SOCKET points at the socket there.

    Raises:
        MissingEnvVarError: TMUX is not set.
        ForwardError: the socket path lacks a directory or file name.
    """
    tmux_env = _require_env(TMUX_ENV, environ)
    socket_path = PurePosixPath(tmux_env.split(",", 1)[0])
    directory = _socket_dir(socket_path)
    name = socket_path.name
    if directory is None or name in ("", ".", ".."):
        raise ForwardError("tmux socket in env has bad filename")

    logger.debug("tmux socket directory: %s, tmux socket filename: %s", directory, name)
    container_socket = str(PurePosixPath(CONTAINER_TMUX_DIR) / name)
    return command.add_environment((TMUX_SOCKET_ENV, container_socket)).add_volume(
        (directory, CONTAINER_TMUX_DIR)
    )


def enable_docker_in_docker(
    command: DockerCommandBuilder,
    dind: NestedRuntime,
) -> DockerCommandBuilder:
    """Start a docker-in-docker helper and point the container at it.

    Errors from dind.preflight() and dind.launch() propagate unchanged.
    """
    logger.debug("docker-in-docker: %r", dind)
    dind.preflight()
    dind.launch()
    return command.add_docker_switch(f"--link {dind.name}:{DIND_ALIAS}").add_environment(
        (DOCKER_HOST_ENV, f"tcp://{DIND_ALIAS}:{DIND_PORT}")
    )
