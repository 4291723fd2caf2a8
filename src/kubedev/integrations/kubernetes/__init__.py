"""Kubernetes integration - API client, configuration and error types."""

from kubedev.integrations.kubernetes.client import KubernetesClient
from kubedev.integrations.kubernetes.config import (
    ClusterConfig,
    KubernetesDefaultsConfig,
    KubernetesPluginConfig,
)
from kubedev.integrations.kubernetes.exceptions import (
    KubernetesAuthError,
    KubernetesConflictError,
    KubernetesConnectionError,
    KubernetesError,
    KubernetesNotFoundError,
    KubernetesTimeoutError,
    KubernetesValidationError,
    OperationCancelledError,
    PodLogsEmptyError,
    PodTerminalStateError,
)

__all__ = [
    "ClusterConfig",
    "KubernetesAuthError",
    "KubernetesClient",
    "KubernetesConflictError",
    "KubernetesConnectionError",
    "KubernetesDefaultsConfig",
    "KubernetesError",
    "KubernetesNotFoundError",
    "KubernetesPluginConfig",
    "KubernetesTimeoutError",
    "KubernetesValidationError",
    "OperationCancelledError",
    "PodLogsEmptyError",
    "PodTerminalStateError",
]
