"""Constants module for boxshell.

Environment variable names, fixed container paths and timeouts (SSOT).
"""

from __future__ import annotations

# === Docker binary ===
DOCKER_BINARY = "docker"
DOCKER_BINARY_ENV = "BOXSHELL_DOCKER"  # Override the docker executable

# === Docker Timeouts (seconds) ===
DOCKER_COMMAND_TIMEOUT = 30  # Quick docker commands (info, inspect, kill)
DOCKER_PULL_TIMEOUT = 600  # 10 min for image pulls
DIND_STARTUP_TIMEOUT = 60  # Waiting for the dind daemon to answer
DIND_CHECK_INTERVAL = 1.0  # Seconds between dind readiness probes

# === Host environment ===
SSH_AUTH_SOCK_ENV = "SSH_AUTH_SOCK"
TMUX_ENV = "TMUX"  # Format: socket_path,pid,session

# === Container side ===
TMUX_SOCKET_ENV = "TMUX_SOCKET"
CONTAINER_TMUX_DIR = "/run/tmux"  # Fixed mount point for the tmux socket dir
DOCKER_HOST_ENV = "DOCKER_HOST"
DIND_ALIAS = "boxshell-docker"  # Hostname of the dind helper inside the container
DIND_PORT = 2375
DIND_IMAGE = "docker:stable-dind"
DIND_NAME_PREFIX = "boxshell-dind"

# === Configuration ===
CONFIG_FILENAME = "boxshell.json"
DEFAULT_SHELL = "sh"
DEFAULT_MOUNT = "/src"
