"""Unit tests for ResourceManager."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from kubedev.integrations.kubernetes.exceptions import KubernetesValidationError
from kubedev.integrations.kubernetes.models.resources import ResourceKind
from kubedev.services.kubernetes.resource_manager import ResourceManager

DELETE_CALLS = [
    (ResourceKind.PODS, "workloads", "delete_pod"),
    (ResourceKind.DEPLOYMENTS, "workloads", "delete_deployment"),
    (ResourceKind.DAEMONSETS, "workloads", "delete_daemon_set"),
    (ResourceKind.STATEFULSETS, "workloads", "delete_stateful_set"),
    (ResourceKind.SERVICES, "networking", "delete_service"),
    (ResourceKind.SECRETS, "configuration", "delete_secret"),
    (ResourceKind.CONFIG_MAPS, "configuration", "delete_config_map"),
    (ResourceKind.SERVICE_ACCOUNTS, "rbac", "delete_service_account"),
    (ResourceKind.JOBS, "jobs", "delete_job"),
    (ResourceKind.CRON_JOBS, "jobs", "delete_cron_job"),
]


@pytest.fixture
def managers() -> dict[str, MagicMock]:
    return {
        name: MagicMock(name=name)
        for name in ("workloads", "configuration", "networking", "jobs", "rbac", "namespaces")
    }


@pytest.fixture
def resource_manager(mock_k8s_client: MagicMock, managers: dict[str, MagicMock]) -> ResourceManager:
    """Create a ResourceManager over mocked resource managers."""
    return ResourceManager(mock_k8s_client, **managers)


@pytest.mark.unit
@pytest.mark.kubernetes
class TestResourceManager:
    """Tests for generic delete dispatch."""

    def test_every_kind_is_covered(self) -> None:
        """Should have one delete operation per kind."""
        assert {kind for kind, _, _ in DELETE_CALLS} | {ResourceKind.NAMESPACES} == set(
            ResourceKind
        )

    @pytest.mark.parametrize(("kind", "manager", "method"), DELETE_CALLS)
    def test_delete_dispatch(
        self,
        resource_manager: ResourceManager,
        managers: dict[str, MagicMock],
        kind: ResourceKind,
        manager: str,
        method: str,
    ) -> None:
        """Should call exactly the matching delete operation."""
        resource_manager.delete_resource(kind, "thing", "dev")

        getattr(managers[manager], method).assert_called_once_with("thing", "dev")

    def test_delete_by_string_kind(
        self, resource_manager: ResourceManager, managers: dict[str, MagicMock]
    ) -> None:
        """Should accept the kind's string value and default the namespace."""
        resource_manager.delete_resource("configMaps", "settings")

        managers["configuration"].delete_config_map.assert_called_once_with("settings", "default")

    def test_delete_namespace_ignores_namespace(
        self, resource_manager: ResourceManager, managers: dict[str, MagicMock]
    ) -> None:
        resource_manager.delete_resource(ResourceKind.NAMESPACES, "sandbox", "dev")

        managers["namespaces"].delete_namespace.assert_called_once_with("sandbox")

    def test_unknown_kind(
        self, resource_manager: ResourceManager, managers: dict[str, MagicMock]
    ) -> None:
        """Should reject unknown kinds without calling anything."""
        with pytest.raises(KubernetesValidationError) as exc_info:
            resource_manager.delete_resource("ingresses", "web")

        assert "ingresses" in exc_info.value.message
        assert "pods" in exc_info.value.validation_errors["kind"]
        for mock in managers.values():
            assert mock.mock_calls == []

    def test_parse_kind(self) -> None:
        assert ResourceManager.parse_kind("cronJobs") is ResourceKind.CRON_JOBS
        with pytest.raises(KubernetesValidationError):
            ResourceManager.parse_kind("CronJobs")
