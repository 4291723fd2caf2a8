"""Shared fixtures for command tests."""

from __future__ import annotations

from collections.abc import Callable
from unittest.mock import MagicMock

import pytest
import typer

from kubedev.integrations.kubernetes.config import KubernetesDefaultsConfig
from kubedev.services.kubernetes.resource_manager import ResourceManager


@pytest.fixture
def mock_session() -> MagicMock:
    """Create a mock KubernetesSession with real defaults."""
    session = MagicMock()
    session.namespace = "default"
    session.client.defaults = KubernetesDefaultsConfig()
    session.client.timeout = 300
    session.resources.parse_kind.side_effect = ResourceManager.parse_kind
    return session


@pytest.fixture
def get_session(mock_session: MagicMock) -> Callable[[], MagicMock]:
    """Create a factory function that returns the mock session."""
    return lambda: mock_session


@pytest.fixture
def build_app(get_session: Callable[[], MagicMock]) -> Callable[..., typer.Typer]:
    """Build a Typer app with one command group registered.

    The empty callback keeps single-command groups addressable by name.
    """

    def _build(register: Callable[..., None]) -> typer.Typer:
        app = typer.Typer()

        @app.callback()
        def main() -> None:
            pass

        register(app, get_session)
        return app

    return _build
