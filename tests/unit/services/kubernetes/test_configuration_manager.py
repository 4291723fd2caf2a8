"""Unit tests for ConfigurationManager."""

from __future__ import annotations

import base64
import io
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from kubernetes.client import V1ConfigMap, V1ConfigMapList, V1ObjectMeta, V1Secret, V1SecretList

from kubedev.services.kubernetes.configuration_manager import (
    MERGE_PATCH,
    ConfigurationManager,
)


def make_config_map(name: str, data: dict[str, str] | None = None) -> V1ConfigMap:
    return V1ConfigMap(metadata=V1ObjectMeta(name=name, namespace="default"), data=data)


def make_secret(name: str, data: dict[str, str] | None = None) -> V1Secret:
    return V1Secret(metadata=V1ObjectMeta(name=name, namespace="default"), type="Opaque", data=data)


@pytest.fixture
def config_manager(mock_k8s_client: MagicMock) -> ConfigurationManager:
    """Create a ConfigurationManager instance with mocked client."""
    mock_k8s_client.core_v1.create_namespaced_config_map.side_effect = (
        lambda namespace, body: body
    )
    mock_k8s_client.core_v1.replace_namespaced_config_map.side_effect = (
        lambda name, namespace, body: body
    )
    mock_k8s_client.core_v1.create_namespaced_secret.side_effect = lambda namespace, body: body
    mock_k8s_client.core_v1.replace_namespaced_secret.side_effect = (
        lambda name, namespace, body: body
    )
    return ConfigurationManager(mock_k8s_client)


class TestConfigMaps:
    """Tests for ConfigMap operations."""

    @pytest.mark.unit
    @pytest.mark.kubernetes
    def test_list_config_maps(
        self, config_manager: ConfigurationManager, mock_k8s_client: MagicMock
    ) -> None:
        mock_k8s_client.core_v1.list_namespaced_config_map.return_value = V1ConfigMapList(
            items=[make_config_map("settings", {"a": "1"})]
        )

        result = config_manager.list_config_maps()

        assert result[0].name == "settings"
        assert result[0].data_keys == ["a"]

    @pytest.mark.unit
    @pytest.mark.kubernetes
    def test_get_config_map_data(
        self, config_manager: ConfigurationManager, mock_k8s_client: MagicMock
    ) -> None:
        mock_k8s_client.core_v1.read_namespaced_config_map.return_value = make_config_map(
            "settings", {"level": "debug"}
        )

        assert config_manager.get_config_map_data("settings") == {"level": "debug"}

    @pytest.mark.unit
    @pytest.mark.kubernetes
    @pytest.mark.parametrize(
        ("existing", "expected"),
        [(["app-settings"], True), (["other"], False), ([], False)],
    )
    def test_config_map_exists(
        self,
        config_manager: ConfigurationManager,
        mock_k8s_client: MagicMock,
        existing: list[str],
        expected: bool,
    ) -> None:
        """Should scan the listing for the kebab-case name."""
        mock_k8s_client.core_v1.list_namespaced_config_map.return_value = V1ConfigMapList(
            items=[make_config_map(name) for name in existing]
        )

        assert config_manager.config_map_exists("appSettings") is expected
        mock_k8s_client.core_v1.read_namespaced_config_map.assert_not_called()

    @pytest.mark.unit
    @pytest.mark.kubernetes
    def test_create_config_map(
        self, config_manager: ConfigurationManager, mock_k8s_client: MagicMock
    ) -> None:
        """Should create a single-key configmap named in kebab case."""
        result = config_manager.create_config_map("logLevel", "debug", "dev")

        body = mock_k8s_client.core_v1.create_namespaced_config_map.call_args.kwargs["body"]
        assert body.metadata.name == "log-level"
        assert body.metadata.namespace == "dev"
        assert body.data == {"logLevel": "debug"}
        assert result.name == "log-level"

    @pytest.mark.unit
    @pytest.mark.kubernetes
    def test_create_config_map_from_files(
        self, config_manager: ConfigurationManager, mock_k8s_client: MagicMock, tmp_path: Path
    ) -> None:
        """Should add one key per file from paths and streams."""
        conf = tmp_path / "nginx.conf"
        conf.write_text("server {}\n")

        result = config_manager.create_config_map_from_files(
            "proxyConfig",
            {
                "nginx.conf": conf,
                "mime.types": io.StringIO("text/html html\n"),
                "robots.txt": io.BytesIO(b"User-agent: *\n"),
            },
        )

        body = mock_k8s_client.core_v1.create_namespaced_config_map.call_args.kwargs["body"]
        assert body.metadata.name == "proxy-config"
        assert body.data == {
            "nginx.conf": "server {}\n",
            "mime.types": "text/html html\n",
            "robots.txt": "User-agent: *\n",
        }
        assert result.data_keys == ["mime.types", "nginx.conf", "robots.txt"]

    @pytest.mark.unit
    @pytest.mark.kubernetes
    def test_create_from_missing_file(
        self, config_manager: ConfigurationManager, mock_k8s_client: MagicMock, tmp_path: Path
    ) -> None:
        """Should fail before creating anything when a file cannot be read."""
        with pytest.raises(OSError):
            config_manager.create_config_map_from_files(
                "settings", {"absent.yaml": tmp_path / "absent.yaml"}
            )

        mock_k8s_client.core_v1.create_namespaced_config_map.assert_not_called()

    @pytest.mark.unit
    @pytest.mark.kubernetes
    def test_create_or_update_creates_when_missing(
        self, config_manager: ConfigurationManager, mock_k8s_client: MagicMock
    ) -> None:
        """Should issue exactly one create and no replace."""
        mock_k8s_client.core_v1.list_namespaced_config_map.return_value = V1ConfigMapList(
            items=[make_config_map("unrelated")]
        )

        config_manager.create_or_update_config_map_from_files(
            "appSettings", {"app.yaml": io.StringIO("a: 1\n")}
        )

        mock_k8s_client.core_v1.create_namespaced_config_map.assert_called_once()
        mock_k8s_client.core_v1.replace_namespaced_config_map.assert_not_called()

    @pytest.mark.unit
    @pytest.mark.kubernetes
    def test_create_or_update_replaces_when_present(
        self, config_manager: ConfigurationManager, mock_k8s_client: MagicMock
    ) -> None:
        """Should issue exactly one replace and no create."""
        mock_k8s_client.core_v1.list_namespaced_config_map.return_value = V1ConfigMapList(
            items=[make_config_map("app-settings", {"old.yaml": "x"})]
        )

        result = config_manager.create_or_update_config_map_from_files(
            "appSettings", {"app.yaml": io.StringIO("a: 1\n")}
        )

        mock_k8s_client.core_v1.replace_namespaced_config_map.assert_called_once()
        mock_k8s_client.core_v1.create_namespaced_config_map.assert_not_called()
        kwargs = mock_k8s_client.core_v1.replace_namespaced_config_map.call_args.kwargs
        assert kwargs["name"] == "app-settings"
        assert kwargs["body"].data == {"app.yaml": "a: 1\n"}
        assert result.data_keys == ["app.yaml"]

    @pytest.mark.unit
    @pytest.mark.kubernetes
    def test_update_config_map_merge_patch(
        self, config_manager: ConfigurationManager, mock_k8s_client: MagicMock
    ) -> None:
        """Should merge data with a JSON merge patch."""
        mock_k8s_client.core_v1.patch_namespaced_config_map.return_value = make_config_map(
            "settings", {"a": "1", "b": "2"}
        )

        result = config_manager.update_config_map("settings", {"b": "2"})

        mock_k8s_client.core_v1.patch_namespaced_config_map.assert_called_once_with(
            name="settings",
            namespace="default",
            body={"data": {"b": "2"}},
            _content_type=MERGE_PATCH,
        )
        assert result.data_keys == ["a", "b"]

    @pytest.mark.unit
    @pytest.mark.kubernetes
    def test_delete_config_map_error(
        self, config_manager: ConfigurationManager, mock_k8s_client: MagicMock
    ) -> None:
        mock_k8s_client.core_v1.delete_namespaced_config_map.side_effect = Exception("API error")
        mock_k8s_client.translate_api_exception.side_effect = RuntimeError("Translated error")

        with pytest.raises(RuntimeError, match="Translated error"):
            config_manager.delete_config_map("settings")


class TestSecrets:
    """Tests for Secret operations."""

    @pytest.mark.unit
    @pytest.mark.kubernetes
    def test_create_secret(
        self, config_manager: ConfigurationManager, mock_k8s_client: MagicMock
    ) -> None:
        """Should create an Opaque secret with a base64 value."""
        result = config_manager.create_secret("DB_PASSWORD", "hunter2", "dev")

        body = mock_k8s_client.core_v1.create_namespaced_secret.call_args.kwargs["body"]
        assert body.metadata.name == "db-password"
        assert body.type == "Opaque"
        assert body.data == {"DB_PASSWORD": base64.b64encode(b"hunter2").decode()}
        assert result.data_keys == ["DB_PASSWORD"]

    @pytest.mark.unit
    @pytest.mark.kubernetes
    def test_get_secret_hides_values(
        self, config_manager: ConfigurationManager, mock_k8s_client: MagicMock
    ) -> None:
        mock_k8s_client.core_v1.read_namespaced_secret.return_value = make_secret(
            "token", {"token": "c2VjcmV0"}
        )

        result = config_manager.get_secret("token")

        assert result.data_keys == ["token"]
        assert "c2VjcmV0" not in result.model_dump_json()

    @pytest.mark.unit
    @pytest.mark.kubernetes
    def test_create_or_update_secret_creates(
        self, config_manager: ConfigurationManager, mock_k8s_client: MagicMock
    ) -> None:
        mock_k8s_client.core_v1.list_namespaced_secret.return_value = V1SecretList(items=[])

        config_manager.create_or_update_secret("apiToken", "abc")

        mock_k8s_client.core_v1.create_namespaced_secret.assert_called_once()
        mock_k8s_client.core_v1.replace_namespaced_secret.assert_not_called()

    @pytest.mark.unit
    @pytest.mark.kubernetes
    def test_create_or_update_secret_replaces(
        self, config_manager: ConfigurationManager, mock_k8s_client: MagicMock
    ) -> None:
        mock_k8s_client.core_v1.list_namespaced_secret.return_value = V1SecretList(
            items=[make_secret("api-token")]
        )

        config_manager.create_or_update_secret("apiToken", "abc")

        mock_k8s_client.core_v1.replace_namespaced_secret.assert_called_once()
        mock_k8s_client.core_v1.create_namespaced_secret.assert_not_called()
        assert (
            mock_k8s_client.core_v1.replace_namespaced_secret.call_args.kwargs["name"]
            == "api-token"
        )

    @pytest.mark.unit
    @pytest.mark.kubernetes
    def test_delete_secret(
        self, config_manager: ConfigurationManager, mock_k8s_client: MagicMock
    ) -> None:
        config_manager.delete_secret("token", "dev")

        mock_k8s_client.core_v1.delete_namespaced_secret.assert_called_once_with(
            name="token", namespace="dev"
        )
