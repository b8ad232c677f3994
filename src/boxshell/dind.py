"""Docker-in-docker helper container.

Dind starts a privileged `docker:dind` container next to the session
container. The session container reaches it through `--link` and
DOCKER_HOST (see forwarding.enable_docker_in_docker).

Usage:
    with Dind((project_dir, "/src")) as dind:
        command = enable_docker_in_docker(command, dind)
        command.run(...)
"""

from __future__ import annotations

import time
import uuid
from typing import Any

from .constants import DIND_CHECK_INTERVAL, DIND_IMAGE, DIND_NAME_PREFIX, DIND_STARTUP_TIMEOUT
from .docker import kill_container, safe_docker_run
from .errors import DindError, DockerError
from .logging import get_logger

logger = get_logger(__name__)


class Dind:
    """Lifecycle of one docker-in-docker helper container.

    The helper mounts the project volume at the same container path as the
    session container, so bind mounts requested from inside the session
    resolve to the same files.
    """

    def __init__(
        self,
        mount: tuple[str, str],
        image: str = DIND_IMAGE,
        *,
        startup_timeout: float = DIND_STARTUP_TIMEOUT,
        check_interval: float = DIND_CHECK_INTERVAL,
    ) -> None:
        self.name = f"{DIND_NAME_PREFIX}-{uuid.uuid4().hex[:6]}"
        self.mount = mount
        self.image = image
        self.startup_timeout = startup_timeout
        self.check_interval = check_interval
        self._launched = False

    def __repr__(self) -> str:
        return f"Dind(name={self.name!r}, image={self.image!r}, mount={self.mount!r})"

    def __enter__(self) -> Dind:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        self.terminate()

    @property
    def launched(self) -> bool:
        return self._launched

    def preflight(self) -> None:
        """Check that the host daemon can run the privileged helper.

        The daemon must answer and must not be rootless, since a rootless
        daemon cannot grant --privileged.
        """
        try:
            result = safe_docker_run(["info", "--format", "{{json .SecurityOptions}}"])
        except DockerError as e:
            raise DindError(f"cannot run docker-in-docker: {e}") from e
        if result.returncode != 0:
            raise DindError("cannot run docker-in-docker: Docker daemon is not reachable")
        if "name=rootless" in result.stdout:
            raise DindError(
                "cannot run docker-in-docker: rootless Docker cannot run privileged containers"
            )

    def launch(self) -> None:
        """Start the helper and block until its daemon answers.

        Raises:
            DindError: the helper failed to start or never became ready.
        """
        host, container = self.mount
        logger.info("Starting docker-in-docker container %s", self.name)
        try:
            result = safe_docker_run(
                [
                    "run",
                    "--rm",
                    "--privileged",
                    "--name",
                    self.name,
                    "-v",
                    f"{host}:{container}",
                    "-d",
                    self.image,
                ]
            )
        except DockerError as e:
            raise DindError(f"failed to start docker-in-docker: {e}") from e
        if result.returncode != 0:
            raise DindError(
                f"failed to start docker-in-docker container {self.name}: "
                f"{result.stderr.strip()}"
            )
        self._launched = True
        self._wait_until_ready()

    def terminate(self) -> None:
        """Kill the helper if it was launched. Safe to call repeatedly."""
        if not self._launched:
            return
        self._launched = False
        logger.info("Stopping docker-in-docker container %s", self.name)
        if not kill_container(self.name):
            logger.warning("Failed to stop docker-in-docker container %s", self.name)

    def _wait_until_ready(self) -> None:
        deadline = time.monotonic() + self.startup_timeout
        while True:
            try:
                result = safe_docker_run(["exec", self.name, "docker", "info"])
                if result.returncode == 0:
                    logger.debug("docker-in-docker %s is ready", self.name)
                    return
            except DockerError as e:
                logger.debug("docker-in-docker probe failed: %s", e)
            if time.monotonic() >= deadline:
                self.terminate()
                raise DindError(
                    f"docker-in-docker container {self.name} not ready "
                    f"after {self.startup_timeout}s"
                )
            time.sleep(self.check_interval)
