"""Docker run command builder for boxshell.

A DockerCommandBuilder accumulates the pieces of a `docker run` invocation
(volumes, environment, raw switches) as an immutable value. Each add_*
call returns a new builder; run() renders the argument list, spawns docker
with the terminal attached and blocks until the container exits.

Rendered layout:
    docker run --rm -it {-v HOST:CONTAINER}* {-e NAME=VALUE}* {switch}*
        IMAGE SHELL -c COMMAND
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass, field, replace

from .docker import get_docker_binary
from .errors import CommandConsumedError, LaunchError, ValidationError, WaitError
from .logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class DockerCommandBuilder:
    """Ordered description of an interactive `docker run` invocation.

    The constructor does not validate image or shell; run() rejects empty
    values before anything is spawned. Duplicate volumes and environment
    entries are kept as given.
    """

    image: str
    shell: str
    volumes: tuple[tuple[str, str], ...] = ()
    environment: tuple[tuple[str, str], ...] = ()
    switches: tuple[str, ...] = ()
    _consumed: bool = field(default=False, init=False, repr=False, compare=False)

    def add_volume(self, spec: tuple[str, str]) -> DockerCommandBuilder:
        """Return a builder with an extra (host, container) volume."""
        self._check_not_consumed()
        host, container = spec
        return replace(self, volumes=(*self.volumes, (host, container)))

    def add_environment(self, spec: tuple[str, str]) -> DockerCommandBuilder:
        """Return a builder with an extra (name, value) environment entry."""
        self._check_not_consumed()
        name, value = spec
        return replace(self, environment=(*self.environment, (name, value)))

    def add_docker_switch(self, switch: str) -> DockerCommandBuilder:
        """Return a builder with an extra raw switch string.

        The string is split on whitespace when the command is rendered, so
        "--link a:b" becomes two arguments.
        """
        self._check_not_consumed()
        return replace(self, switches=(*self.switches, switch))

    def build_args(self, subshell_command: str) -> list[str]:
        """Render the arguments passed to the docker binary."""
        return [
            "run",
            "--rm",
            "-it",
            *self._build_volume_switches(),
            *self._build_environment_switches(),
            *self._build_docker_switches(),
            self.image,
            self.shell,
            "-c",
            subshell_command,
        ]

    def run(self, subshell_command: str) -> int:
        """Spawn docker attached to this terminal and wait for it.

        Returns:
            The container's exit status. Non-zero statuses are returned,
            not raised.

        Raises:
            ValidationError: image or shell is empty.
            CommandConsumedError: this builder has already been run.
            LaunchError: the docker binary could not be spawned.
            WaitError: waiting on the spawned process failed.
        """
        self._check_not_consumed()
        if not self.image:
            raise ValidationError("docker image must not be empty")
        if not self.shell:
            raise ValidationError("container shell must not be empty")
        object.__setattr__(self, "_consumed", True)

        cmd = [get_docker_binary(), *self.build_args(subshell_command)]
        logger.debug(
            "Spawning docker command with configuration: %r args: %s", self, subshell_command
        )
        try:
            # stdin/stdout/stderr are inherited for full interactive passthrough
            proc = subprocess.Popen(cmd)
        except OSError as e:
            raise LaunchError(f"failed to launch docker: {e}") from e

        return self._wait(proc)

    @staticmethod
    def _wait(proc: subprocess.Popen[bytes]) -> int:
        while True:
            try:
                returncode = proc.wait()
            except KeyboardInterrupt:
                # Ctrl+C also reached the container through the terminal
                logger.debug("Interrupted, waiting for docker to exit")
                continue
            except OSError as e:
                raise WaitError(f"failed to wait for docker command: {e}") from e
            logger.debug("Docker command exited with status %d", returncode)
            return returncode

    def _check_not_consumed(self) -> None:
        if self._consumed:
            raise CommandConsumedError("docker command has already been run")

    def _build_volume_switches(self) -> list[str]:
        switches: list[str] = []
        for host, container in self.volumes:
            switches.extend(["-v", f"{host}:{container}"])
        return switches

    def _build_environment_switches(self) -> list[str]:
        switches: list[str] = []
        for name, value in self.environment:
            switches.extend(["-e", f"{name}={value}"])
        return switches

    def _build_docker_switches(self) -> list[str]:
        switches: list[str] = []
        for switch in self.switches:
            switches.extend(switch.split())
        return switches
