"""Project configuration for boxshell.

A project describes its development container in a boxshell.json file:

    {
        "image": "python:3.12",
        "shell": "bash",
        "init": ["pip install -e ."],
        "mount": "/src",
        "docker_switches": ["--net host"],
        "forward_ssh_agent": true,
        "forward_tmux_socket": false,
        "dind": false
    }
"""

from __future__ import annotations

import json
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from .constants import CONFIG_FILENAME, DEFAULT_MOUNT, DEFAULT_SHELL
from .errors import ConfigError


@dataclass(frozen=True)
class Config:
    """boxshell project configuration model."""

    image: str
    shell: str = DEFAULT_SHELL
    init: tuple[str, ...] = ()
    mount: str = DEFAULT_MOUNT
    docker_switches: tuple[str, ...] = ()
    forward_ssh_agent: bool = False
    forward_tmux_socket: bool = False
    dind: bool = False

    def __post_init__(self) -> None:
        # Rendered as "-w <mount>", which is split on whitespace
        if not self.mount.startswith("/") or len(self.mount.split()) != 1:
            raise ConfigError(f"mount must be an absolute path without spaces: {self.mount!r}")

    def subshell_command(self, command: str | None = None) -> str:
        """Join init steps and the final command (default: the shell) with &&."""
        return " && ".join([*self.init, command or self.shell])


_STR_KEYS = ("image", "shell", "mount")
_LIST_KEYS = ("init", "docker_switches")
_BOOL_KEYS = ("forward_ssh_agent", "forward_tmux_socket", "dind")


def get_config_path(project_dir: Path | None = None) -> Path:
    """Get the path of the project config file."""
    return (project_dir or Path.cwd()) / CONFIG_FILENAME


def parse_config(data: Any, source: str = CONFIG_FILENAME) -> Config:
    """Build a Config from decoded JSON.

    Raises:
        ConfigError: If keys are unknown, values have the wrong type or
            the image is missing.
    """
    if not isinstance(data, dict):
        raise ConfigError(f"{source}: top level must be an object")

    known = {f.name for f in fields(Config)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"{source}: unknown key(s): {', '.join(unknown)}")

    for key in _STR_KEYS:
        if key in data and not isinstance(data[key], str):
            raise ConfigError(f"{source}: '{key}' must be a string")
    for key in _BOOL_KEYS:
        if key in data and not isinstance(data[key], bool):
            raise ConfigError(f"{source}: '{key}' must be true or false")
    values = dict(data)
    for key in _LIST_KEYS:
        if key not in values:
            continue
        items = values[key]
        if not isinstance(items, list) or not all(isinstance(i, str) for i in items):
            raise ConfigError(f"{source}: '{key}' must be a list of strings")
        values[key] = tuple(items)

    if not values.get("image"):
        raise ConfigError(f"{source}: 'image' is required")
    if "shell" in values and not values["shell"]:
        raise ConfigError(f"{source}: 'shell' must not be empty")

    return Config(**values)


def load_config(path: Path) -> Config:
    """Load a project configuration file.

    Raises:
        ConfigError: If the file is missing, unreadable or invalid.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ConfigError(f"config file not found: {path}") from e
    except OSError as e:
        raise ConfigError(f"cannot read config file {path}: {e}") from e

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigError(f"{path}: invalid JSON ({e})") from e

    return parse_config(data, source=str(path))
