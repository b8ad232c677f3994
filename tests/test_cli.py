"""Tests for boxshell CLI and run workflow."""

from __future__ import annotations

import json
import os
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from boxshell import __version__
from boxshell.cli import cli
from boxshell.cli.run import build_command, launch
from boxshell.config import Config
from boxshell.errors import DindError, LaunchError, MissingEnvVarError


@pytest.fixture
def project(tmp_path: Path) -> Path:
    (tmp_path / "boxshell.json").write_text(
        json.dumps({"image": "alpine:3", "shell": "sh", "init": ["echo ready"]}),
        encoding="utf-8",
    )
    return tmp_path


class TestBuildCommand:
    """Tests for build_command."""

    def test_project_mount_and_workdir(self, tmp_path: Path) -> None:
        command = build_command(Config(image="alpine:3"), tmp_path)
        assert command.volumes == ((str(tmp_path), "/src"),)
        assert command.switches == ("-w /src",)

    def test_workdir_is_single_argument(self, tmp_path: Path) -> None:
        args = build_command(Config(image="alpine:3", mount="/work"), tmp_path).build_args("true")
        i = args.index("-w")
        assert args[i + 1 : i + 3] == ["/work", "alpine:3"]

    def test_forwarders_before_configured_switches(self, tmp_path: Path) -> None:
        config = Config(
            image="alpine:3",
            docker_switches=("--net host",),
            forward_ssh_agent=True,
            forward_tmux_socket=True,
        )
        env = {"SSH_AUTH_SOCK": "/tmp/ssh-x/agent", "TMUX": "/tmp/tmux-1/default,1,0"}
        with patch.dict(os.environ, env):
            command = build_command(config, tmp_path)
        assert command.switches == ("-w /src", "--net host")
        assert [name for name, _ in command.environment] == ["SSH_AUTH_SOCK", "TMUX_SOCKET"]
        assert command.volumes[1:] == (("/tmp/ssh-x", "/tmp/ssh-x"), ("/tmp/tmux-1", "/run/tmux"))

    def test_missing_agent_aborts(self, tmp_path: Path) -> None:
        config = Config(image="alpine:3", forward_ssh_agent=True)
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(MissingEnvVarError):
                build_command(config, tmp_path)


class TestLaunch:
    """Tests for launch."""

    def test_runs_subshell_command(self, tmp_path: Path) -> None:
        config = Config(image="alpine:3", init=("make deps",))
        with patch("boxshell.command.subprocess.Popen") as mock_popen:
            mock_popen.return_value.wait.return_value = 4
            assert launch(config, tmp_path, "make test") == 4
        assert mock_popen.call_args.args[0][-1] == "make deps && make test"

    def test_dind_wraps_session(self, tmp_path: Path) -> None:
        config = Config(image="alpine:3", dind=True)
        dind = MagicMock()
        dind.name = "boxshell-dind-000000"
        dind.__enter__.return_value = dind
        with patch("boxshell.cli.run.Dind", return_value=dind) as mock_dind, patch(
            "boxshell.command.subprocess.Popen"
        ) as mock_popen:
            mock_popen.return_value.wait.return_value = 0
            assert launch(config, tmp_path) == 0

        mock_dind.assert_called_once_with((str(tmp_path), "/src"))
        dind.preflight.assert_called_once_with()
        dind.launch.assert_called_once_with()
        dind.__exit__.assert_called_once()
        args = mock_popen.call_args.args[0]
        assert "DOCKER_HOST=tcp://boxshell-docker:2375" in args
        assert "boxshell-dind-000000:boxshell-docker" in args

    def test_dind_failure_skips_session(self, tmp_path: Path) -> None:
        config = Config(image="alpine:3", dind=True)
        dind = MagicMock()
        dind.__enter__.return_value = dind
        dind.__exit__.return_value = False
        dind.preflight.side_effect = DindError("no daemon")
        with patch("boxshell.cli.run.Dind", return_value=dind), patch(
            "boxshell.command.subprocess.Popen"
        ) as mock_popen:
            with pytest.raises(DindError):
                launch(config, tmp_path)
        mock_popen.assert_not_called()


class TestCli:
    """Tests for the click commands."""

    def test_version(self) -> None:
        result = CliRunner().invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_shell_exit_status_propagates(self, project: Path) -> None:
        with patch("boxshell.command.subprocess.Popen") as mock_popen:
            mock_popen.return_value.wait.return_value = 7
            result = CliRunner().invoke(cli, ["--config", str(project / "boxshell.json")])
        assert result.exit_code == 7
        assert mock_popen.call_args.args[0][-1] == "echo ready && sh"

    def test_run_joins_command(self, project: Path) -> None:
        with patch("boxshell.command.subprocess.Popen") as mock_popen:
            mock_popen.return_value.wait.return_value = 0
            result = CliRunner().invoke(
                cli, ["--config", str(project / "boxshell.json"), "run", "ls", "-la"]
            )
        assert result.exit_code == 0
        assert mock_popen.call_args.args[0][-1] == "echo ready && ls -la"

    def test_missing_config_fails(self, tmp_path: Path) -> None:
        result = CliRunner().invoke(cli, ["--config", str(tmp_path / "boxshell.json")])
        assert result.exit_code == 1

    def test_launch_error_fails(self, project: Path) -> None:
        with patch("boxshell.cli.launch", side_effect=LaunchError("docker missing")):
            result = CliRunner().invoke(cli, ["--config", str(project / "boxshell.json")])
        assert result.exit_code == 1

    def test_pull(self, project: Path) -> None:
        with patch("boxshell.cli.pull_image", return_value=0) as mock_pull:
            result = CliRunner().invoke(cli, ["--config", str(project / "boxshell.json"), "pull"])
        assert result.exit_code == 0
        mock_pull.assert_called_once_with("alpine:3")

    def test_doctor(self, project: Path) -> None:
        with patch("boxshell.cli.check_docker_status", return_value=False):
            result = CliRunner().invoke(
                cli, ["--config", str(project / "boxshell.json"), "doctor"]
            )
        assert result.exit_code == 0
