"""Unit tests for K8sBaseManager."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from kubedev.integrations.kubernetes.exceptions import KubernetesNotFoundError
from kubedev.services.kubernetes.base import K8sBaseManager


class SampleManager(K8sBaseManager):
    _entity_name = "sample"


@pytest.fixture
def manager(mock_k8s_client: MagicMock) -> SampleManager:
    return SampleManager(mock_k8s_client)


@pytest.mark.unit
@pytest.mark.kubernetes
class TestK8sBaseManager:
    """Tests for shared manager behaviour."""

    def test_resolve_namespace(self, manager: SampleManager) -> None:
        assert manager._resolve_namespace("dev") == "dev"
        assert manager._resolve_namespace(None) == "default"

    def test_resolve_namespace_follows_client(
        self, manager: SampleManager, mock_k8s_client: MagicMock
    ) -> None:
        """Should read the client default on every call."""
        mock_k8s_client.default_namespace = "sandbox"
        assert manager._resolve_namespace(None) == "sandbox"

    def test_handle_api_error(self, manager: SampleManager, mock_k8s_client: MagicMock) -> None:
        """Should raise the translated exception with resource details."""
        original = Exception("404")
        mock_k8s_client.translate_api_exception.side_effect = None
        mock_k8s_client.translate_api_exception.return_value = KubernetesNotFoundError(
            resource_type="Pod", resource_name="api-0"
        )

        with pytest.raises(KubernetesNotFoundError):
            manager._handle_api_error(original, "Pod", "api-0", "dev")

        mock_k8s_client.translate_api_exception.assert_called_once_with(
            original, resource_type="Pod", resource_name="api-0", namespace="dev"
        )

    def test_read_with_retry(self, manager: SampleManager, mock_k8s_client: MagicMock) -> None:
        """Should call through the client's retry decorator with kwargs."""
        api_call = MagicMock(return_value="result")

        result = manager._read_with_retry(api_call, "Pod", "dev", namespace="dev", limit=5)

        assert result == "result"
        api_call.assert_called_once_with(namespace="dev", limit=5)
        mock_k8s_client.make_retry_decorator.assert_called_once()

    def test_read_with_retry_translates(
        self, manager: SampleManager, mock_k8s_client: MagicMock
    ) -> None:
        """Should translate errors before the retry policy sees them."""
        api_call = MagicMock(side_effect=Exception("boom"))
        mock_k8s_client.translate_api_exception.side_effect = RuntimeError("Translated error")

        with pytest.raises(RuntimeError, match="Translated error"):
            manager._read_with_retry(api_call, "Pod", "dev", namespace="dev")
