"""Shared fixtures for Kubernetes service tests."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest


@pytest.fixture
def mock_k8s_client() -> MagicMock:
    """Create a mock Kubernetes client.

    Retried reads run once (the retry decorator is the identity) and API
    errors pass through ``translate_api_exception`` unchanged.
    """
    mock_client = MagicMock()
    mock_client.default_namespace = "default"
    mock_client.make_retry_decorator.return_value = lambda f: f
    mock_client.translate_api_exception.side_effect = lambda e, **kwargs: e
    return mock_client
