"""Kubernetes service module.

Resource managers built on ``KubernetesClient`` and the session facade
that composes them.
"""

from kubedev.services.kubernetes.configuration_manager import ConfigurationManager
from kubedev.services.kubernetes.job_manager import JobManager
from kubedev.services.kubernetes.namespace_manager import NamespaceManager
from kubedev.services.kubernetes.networking_manager import NetworkingManager
from kubedev.services.kubernetes.rbac_manager import RBACManager
from kubedev.services.kubernetes.readiness_manager import ReadinessManager
from kubedev.services.kubernetes.resource_manager import ResourceManager
from kubedev.services.kubernetes.session import KubernetesSession
from kubedev.services.kubernetes.streaming_manager import LogStreamHandle, StreamingManager
from kubedev.services.kubernetes.workload_manager import WorkloadManager

__all__ = [
    "ConfigurationManager",
    "JobManager",
    "KubernetesSession",
    "LogStreamHandle",
    "NamespaceManager",
    "NetworkingManager",
    "RBACManager",
    "ReadinessManager",
    "ResourceManager",
    "StreamingManager",
    "WorkloadManager",
]
