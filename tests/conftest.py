"""Pytest configuration and fixtures for boxshell tests.

This module ensures the boxshell package is importable during tests
without requiring installation.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Add src directory to path for development testing
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from boxshell.command import DockerCommandBuilder  # noqa: E402


@pytest.fixture
def command() -> DockerCommandBuilder:
    """A bare builder for an alpine shell."""
    return DockerCommandBuilder("alpine:3", "sh")
