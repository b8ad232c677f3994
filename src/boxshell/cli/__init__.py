"""CLI package for boxshell.

This package contains the CLI commands and supporting modules:
- run: Docker command assembly and session execution
- utils: Config lookup and error reporting
"""

from __future__ import annotations

import os
import sys

import click
from rich.table import Table

from .. import __version__
from ..constants import SSH_AUTH_SOCK_ENV, TMUX_ENV
from ..docker import check_docker_status, pull_image
from ..errors import BoxshellError
from ..logging import set_debug
from .run import launch
from .utils import console, fail, load_project, resolve_config_path

__all__ = ["cli"]


@click.group(invoke_without_command=True)
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(dir_okay=False),
    help="Config file (default: ./boxshell.json)",
)
@click.option("--debug", "-d", is_flag=True, help="Enable debug logging")
@click.pass_context
@click.version_option(version=__version__, prog_name="boxshell")
def cli(ctx: click.Context, config_path: str | None, debug: bool) -> None:
    """boxshell - Reproducible development shells in Docker.

    Run 'boxshell' in a project with a boxshell.json to open its shell.
    """
    if debug:
        set_debug(True)
    ctx.obj = {"config_path": config_path}

    if ctx.invoked_subcommand is not None:
        return

    _run_session(config_path, None)


@cli.command(context_settings={"ignore_unknown_options": True})
@click.argument("command", nargs=-1, required=True, type=click.UNPROCESSED)
@click.pass_context
def run(ctx: click.Context, command: tuple[str, ...]) -> None:
    """Run a single command in the project container."""
    _run_session(ctx.obj["config_path"], " ".join(command))


@cli.command()
@click.pass_context
def pull(ctx: click.Context) -> None:
    """Pull the project image."""
    try:
        config, _ = load_project(ctx.obj["config_path"])
        returncode = pull_image(config.image)
    except BoxshellError as e:
        fail(e)
    if returncode != 0:
        console.print(f"[red]Error: failed to pull {config.image}[/red]", highlight=False)
    sys.exit(returncode)


@cli.command()
@click.pass_context
def doctor(ctx: click.Context) -> None:
    """Check what the project session needs from this host."""
    checks: list[tuple[str, bool, str]] = []

    checks.append(("Docker running", check_docker_status(), "Start Docker"))

    config_file = resolve_config_path(ctx.obj["config_path"])
    try:
        load_project(ctx.obj["config_path"])
        checks.append((f"Config ({config_file.name})", True, ""))
    except BoxshellError as e:
        checks.append((f"Config ({config_file.name})", False, str(e)))

    checks.append(("SSH agent", SSH_AUTH_SOCK_ENV in os.environ, "Start ssh-agent"))
    checks.append(("tmux session", TMUX_ENV in os.environ, "Run inside tmux"))

    table = Table(title="System Status")
    table.add_column("Check")
    table.add_column("Status")
    table.add_column("Action", style="dim")

    for name, ok, action in checks:
        status = "[green]OK[/green]" if ok else "[red]FAIL[/red]"
        table.add_row(name, status, "" if ok else action)

    console.print(table)


def _run_session(config_path: str | None, command: str | None) -> None:
    try:
        config, project_dir = load_project(config_path)
        returncode = launch(config, project_dir, command)
    except BoxshellError as e:
        fail(e)
    sys.exit(returncode)


if __name__ == "__main__":  # pragma: no cover
    cli()
