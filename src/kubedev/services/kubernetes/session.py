"""Kubernetes session: one client plus every manager bound to it.

Each session owns its own client, so the current context and default
namespace are never shared between sessions.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from kubedev.integrations.kubernetes.client import KubernetesClient
from kubedev.integrations.kubernetes.config import KubernetesPluginConfig
from kubedev.services.kubernetes.configuration_manager import ConfigurationManager
from kubedev.services.kubernetes.job_manager import JobManager
from kubedev.services.kubernetes.namespace_manager import NamespaceManager
from kubedev.services.kubernetes.networking_manager import NetworkingManager
from kubedev.services.kubernetes.rbac_manager import RBACManager
from kubedev.services.kubernetes.readiness_manager import ReadinessManager
from kubedev.services.kubernetes.resource_manager import ResourceManager
from kubedev.services.kubernetes.streaming_manager import StreamingManager
from kubedev.services.kubernetes.workload_manager import WorkloadManager

if TYPE_CHECKING:
    from kubedev.integrations.kubernetes.models.cluster import ClusterContext


class KubernetesSession:
    """Facade over a ``KubernetesClient`` and its resource managers.

    Example:
        ```python
        from kubedev.services.kubernetes import KubernetesSession

        with KubernetesSession.from_config() as session:
            session.set_namespace("dev")
            session.readiness.wait_for_pods(["api", "worker"], timeout=300)
            for entry in session.streaming.get_pod_logs("api-0"):
                print(entry.timestamp, entry.message)
        ```
    """

    def __init__(self, client: KubernetesClient) -> None:
        self.client = client
        self.workloads = WorkloadManager(client)
        self.configuration = ConfigurationManager(client)
        self.networking = NetworkingManager(client)
        self.jobs = JobManager(client)
        self.rbac = RBACManager(client)
        self.namespaces = NamespaceManager(client)
        self.resources = ResourceManager(
            client,
            workloads=self.workloads,
            configuration=self.configuration,
            networking=self.networking,
            jobs=self.jobs,
            rbac=self.rbac,
            namespaces=self.namespaces,
        )
        self.readiness = ReadinessManager(client, workloads=self.workloads)
        self.streaming = StreamingManager(client, workloads=self.workloads)

    @classmethod
    def from_config(
        cls,
        config: KubernetesPluginConfig | None = None,
        *,
        context: str | None = None,
        namespace: str | None = None,
    ) -> KubernetesSession:
        """Build a session from kubedev config (loaded from file and env if None).

        Args:
            config: kubedev configuration.
            context: Context or named cluster to start in.
            namespace: Default namespace override.
        """
        config = config or KubernetesPluginConfig.from_file()
        if context:
            config = config.model_copy(update={"active_cluster": context})
        session = cls(KubernetesClient(config))
        if namespace:
            session.set_namespace(namespace)
        return session

    # =========================================================================
    # Context and namespace
    # =========================================================================

    def set_context(self, name: str) -> None:
        """Switch the session's client to another context."""
        self.client.switch_context(name)

    def get_current_context(self) -> ClusterContext:
        return self.client.get_current_context()

    def list_contexts(self) -> list[ClusterContext]:
        return self.client.list_contexts()

    def set_namespace(self, namespace: str | None) -> None:
        """Set the namespace used when an operation is not given one."""
        self.client.set_namespace(namespace)

    @property
    def namespace(self) -> str:
        return self.client.default_namespace

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> KubernetesSession:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
