"""Shared pytest fixtures for kubedev tests."""

from __future__ import annotations

import os
import tempfile
from collections.abc import Generator
from pathlib import Path

import pytest
from typer.testing import CliRunner


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def temp_dir() -> Generator[Path]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_config_file(temp_dir: Path) -> Path:
    """Create a temporary kubedev config file."""
    config_path = temp_dir / "config.yaml"
    config_path.write_text(
        """
clusters:
  staging:
    context: staging-admin
    namespace: apps
    timeout: 60
active_cluster: staging
defaults:
  poll_interval: 0.5
  shell: sh
"""
    )
    return config_path


@pytest.fixture(autouse=True)
def reset_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Reset environment variables for each test."""
    # Clear any KUBEDEV_ prefixed environment variables
    for key in list(os.environ.keys()):
        if key.startswith("KUBEDEV_"):
            monkeypatch.delenv(key, raising=False)
