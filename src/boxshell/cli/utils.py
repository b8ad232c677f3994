"""CLI utilities for boxshell.

Config lookup and fatal error reporting shared by the commands.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import NoReturn

from rich.console import Console

from ..config import Config, get_config_path, load_config
from ..errors import BoxshellError

console = Console(stderr=True)


def resolve_config_path(config_path: str | None) -> Path:
    """Return the absolute config path from --config, or the default."""
    if config_path:
        return Path(config_path).resolve()
    return get_config_path().resolve()


def load_project(config_path: str | None) -> tuple[Config, Path]:
    """Load the project config and return it with the project directory.

    The project directory is the directory holding the config file.
    """
    path = resolve_config_path(config_path)
    return load_config(path), path.parent


def fail(error: BoxshellError) -> NoReturn:
    """Report a fatal error and exit with status 1."""
    console.print(f"[red]Error: {error}[/red]", highlight=False)
    sys.exit(1)
