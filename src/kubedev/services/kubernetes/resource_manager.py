"""Generic delete dispatch over every supported resource kind."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from kubedev.integrations.kubernetes.exceptions import KubernetesValidationError
from kubedev.integrations.kubernetes.models.resources import ResourceKind
from kubedev.services.kubernetes.base import K8sBaseManager
from kubedev.services.kubernetes.configuration_manager import ConfigurationManager
from kubedev.services.kubernetes.job_manager import JobManager
from kubedev.services.kubernetes.namespace_manager import NamespaceManager
from kubedev.services.kubernetes.networking_manager import NetworkingManager
from kubedev.services.kubernetes.rbac_manager import RBACManager
from kubedev.services.kubernetes.workload_manager import WorkloadManager

if TYPE_CHECKING:
    from kubedev.integrations.kubernetes.client import KubernetesClient

Deleter = Callable[[str, str], None]


class ResourceManager(K8sBaseManager):
    """Delete any supported resource by kind and name.

    Every ``ResourceKind`` member is mapped to exactly one delete operation;
    the mapping is checked when the manager is built.
    """

    _entity_name = "resource"

    def __init__(
        self,
        client: KubernetesClient,
        *,
        workloads: WorkloadManager | None = None,
        configuration: ConfigurationManager | None = None,
        networking: NetworkingManager | None = None,
        jobs: JobManager | None = None,
        rbac: RBACManager | None = None,
        namespaces: NamespaceManager | None = None,
    ) -> None:
        super().__init__(client)
        workloads = workloads or WorkloadManager(client)
        configuration = configuration or ConfigurationManager(client)
        networking = networking or NetworkingManager(client)
        jobs = jobs or JobManager(client)
        rbac = rbac or RBACManager(client)
        namespaces = namespaces or NamespaceManager(client)

        self._deleters: dict[ResourceKind, Deleter] = {
            ResourceKind.PODS: workloads.delete_pod,
            ResourceKind.NAMESPACES: lambda name, _ns: namespaces.delete_namespace(name),
            ResourceKind.DEPLOYMENTS: workloads.delete_deployment,
            ResourceKind.DAEMONSETS: workloads.delete_daemon_set,
            ResourceKind.STATEFULSETS: workloads.delete_stateful_set,
            ResourceKind.SERVICES: networking.delete_service,
            ResourceKind.SECRETS: configuration.delete_secret,
            ResourceKind.CONFIG_MAPS: configuration.delete_config_map,
            ResourceKind.SERVICE_ACCOUNTS: rbac.delete_service_account,
            ResourceKind.JOBS: jobs.delete_job,
            ResourceKind.CRON_JOBS: jobs.delete_cron_job,
        }
        missing = set(ResourceKind) - set(self._deleters)
        if missing:
            raise RuntimeError(f"No delete operation for: {sorted(missing)}")

    @staticmethod
    def parse_kind(kind: ResourceKind | str) -> ResourceKind:
        """Convert a kind name to a ``ResourceKind``.

        Raises:
            KubernetesValidationError: If the kind is not supported.
        """
        try:
            return ResourceKind(kind)
        except ValueError:
            raise KubernetesValidationError(
                message=f"Unsupported resource kind '{kind}'",
                validation_errors={"kind": [k.value for k in ResourceKind]},
                status_code=None,
            ) from None

    def delete_resource(
        self, kind: ResourceKind | str, name: str, namespace: str | None = None
    ) -> None:
        """Delete a resource of the given kind.

        Namespaces are cluster scoped, so ``namespace`` is ignored for them.

        Args:
            kind: Resource kind, as a ``ResourceKind`` or its string value.
            name: Resource name.
            namespace: Target namespace.

        Raises:
            KubernetesValidationError: If ``kind`` is not a supported kind.
        """
        resource_kind = self.parse_kind(kind)
        ns = self._resolve_namespace(namespace)
        self._log.debug("deleting_resource", kind=str(resource_kind), name=name, namespace=ns)
        self._deleters[resource_kind](name, ns)
