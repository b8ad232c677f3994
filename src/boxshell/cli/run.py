"""Run operations for boxshell.

Assembles the docker command for a project and runs the session.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..command import DockerCommandBuilder
from ..dind import Dind
from ..forwarding import (
    enable_docker_in_docker,
    enable_forward_ssh_agent,
    enable_forward_tmux_socket,
)
from ..logging import get_logger

if TYPE_CHECKING:
    from pathlib import Path

    from ..config import Config

logger = get_logger(__name__)


def build_command(config: Config, project_dir: Path) -> DockerCommandBuilder:
    """Build the session command without docker-in-docker.

    The project directory is mounted at config.mount and used as the
    working directory. Forwarders run before the configured switches so a
    missing SSH agent or tmux session aborts before anything is started.
    """
    command = (
        DockerCommandBuilder(config.image, config.shell)
        .add_volume((str(project_dir), config.mount))
        .add_docker_switch(f"-w {config.mount}")
    )

    if config.forward_ssh_agent:
        command = enable_forward_ssh_agent(command)
    if config.forward_tmux_socket:
        command = enable_forward_tmux_socket(command)

    for switch in config.docker_switches:
        command = command.add_docker_switch(switch)

    return command


def launch(config: Config, project_dir: Path, command: str | None = None) -> int:
    """Run an interactive session (or a single command) for a project.

    Returns:
        The container's exit status.
    """
    docker_command = build_command(config, project_dir)
    subshell_command = config.subshell_command(command)
    logger.debug("Subshell command: %s", subshell_command)

    if not config.dind:
        return docker_command.run(subshell_command)

    with Dind((str(project_dir), config.mount)) as dind:
        docker_command = enable_docker_in_docker(docker_command, dind)
        return docker_command.run(subshell_command)
