"""Kubernetes resource display models."""

from kubedev.integrations.kubernetes.models.base import K8sEntityBase
from kubedev.integrations.kubernetes.models.cluster import (
    ClusterContext,
    EventSummary,
    NamespaceSummary,
)
from kubedev.integrations.kubernetes.models.configuration import (
    ConfigMapSummary,
    SecretSummary,
)
from kubedev.integrations.kubernetes.models.jobs import (
    CronJobSummary,
    JobSummary,
)
from kubedev.integrations.kubernetes.models.logs import LogEntry
from kubedev.integrations.kubernetes.models.networking import (
    ServicePort,
    ServiceSummary,
)
from kubedev.integrations.kubernetes.models.rbac import ServiceAccountSummary
from kubedev.integrations.kubernetes.models.resources import ResourceKind
from kubedev.integrations.kubernetes.models.workloads import (
    ContainerStatus,
    DaemonSetSummary,
    DeploymentSummary,
    PodStatusSnapshot,
    PodSummary,
    ScaleSummary,
    StatefulSetSummary,
    colorize_status,
    find_state,
)

__all__ = [
    "ClusterContext",
    "ConfigMapSummary",
    "ContainerStatus",
    "CronJobSummary",
    "DaemonSetSummary",
    "DeploymentSummary",
    "EventSummary",
    "JobSummary",
    "K8sEntityBase",
    "LogEntry",
    "NamespaceSummary",
    "PodStatusSnapshot",
    "PodSummary",
    "ResourceKind",
    "ScaleSummary",
    "SecretSummary",
    "ServiceAccountSummary",
    "ServicePort",
    "ServiceSummary",
    "StatefulSetSummary",
    "colorize_status",
    "find_state",
]
