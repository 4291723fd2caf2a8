"""Exceptions raised by kubedev Kubernetes operations."""

from __future__ import annotations

from typing import Any


class KubernetesError(Exception):
    """Base exception for Kubernetes operations.

    Attributes:
        message: Human-readable error message.
        status_code: HTTP status code returned by the API server, if any.
        resource_type: Kind of the resource involved (e.g., "Pod").
        resource_name: Name of the resource involved.
        namespace: Namespace of the resource.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        resource_type: str | None = None,
        resource_name: str | None = None,
        namespace: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.resource_type = resource_type
        self.resource_name = resource_name
        self.namespace = namespace

    def __str__(self) -> str:
        parts = [self.message]
        if self.status_code:
            parts.append(f"(status: {self.status_code})")
        if self.resource_type and self.resource_name:
            location = f"[{self.resource_type}/{self.resource_name}"
            if self.namespace:
                location += f" in {self.namespace}"
            location += "]"
            parts.append(location)
        return " ".join(parts)


class KubernetesConnectionError(KubernetesError):
    """Raised when the cluster cannot be reached or a session drops.

    Covers kubeconfig problems, unreachable API servers, failed context
    rebuilds and exec channels that close with an error.
    """

    def __init__(
        self,
        message: str = "Failed to connect to Kubernetes cluster",
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message=message)
        self.original_error = original_error


class KubernetesAuthError(KubernetesError):
    """Raised on 401/403 responses."""

    def __init__(
        self,
        message: str = "Kubernetes authentication/authorization failed",
        status_code: int | None = 401,
        reason: str | None = None,
    ) -> None:
        super().__init__(message=message, status_code=status_code)
        self.reason = reason


class KubernetesNotFoundError(KubernetesError):
    """Raised when a resource cannot be resolved.

    Used both for 404 responses and for local resolution failures such as a
    pod short name matching nothing or a pod without containers.
    """

    def __init__(
        self,
        message: str = "Kubernetes resource not found",
        resource_type: str | None = None,
        resource_name: str | None = None,
        namespace: str | None = None,
    ) -> None:
        if resource_type and resource_name:
            message = f"{resource_type} '{resource_name}' not found"
            if namespace:
                message += f" in namespace '{namespace}'"
        super().__init__(
            message=message,
            status_code=404,
            resource_type=resource_type,
            resource_name=resource_name,
            namespace=namespace,
        )


class KubernetesValidationError(KubernetesError):
    """Raised when a request is rejected as invalid (400/422) or a caller
    passes an argument kubedev cannot act on."""

    def __init__(
        self,
        message: str = "Invalid resource specification",
        validation_errors: dict[str, Any] | None = None,
        status_code: int | None = 422,
    ) -> None:
        super().__init__(message=message, status_code=status_code)
        self.validation_errors = validation_errors or {}


class KubernetesConflictError(KubernetesError):
    """Raised on 409 responses."""

    def __init__(
        self,
        message: str = "Resource conflict",
        resource_type: str | None = None,
        resource_name: str | None = None,
        namespace: str | None = None,
    ) -> None:
        if resource_type and resource_name:
            message = f"{resource_type} '{resource_name}' already exists"
            if namespace:
                message += f" in namespace '{namespace}'"
        super().__init__(
            message=message,
            status_code=409,
            resource_type=resource_type,
            resource_name=resource_name,
            namespace=namespace,
        )


class KubernetesTimeoutError(KubernetesError):
    """Raised when a caller-supplied deadline expires."""

    def __init__(
        self,
        message: str = "Kubernetes operation timed out",
        timeout_seconds: float | None = None,
    ) -> None:
        if timeout_seconds:
            message = f"{message} (after {timeout_seconds:g}s)"
        super().__init__(message=message)
        self.timeout_seconds = timeout_seconds


class OperationCancelledError(KubernetesError):
    """Raised when a long-running wait is cancelled through its cancel event."""

    def __init__(self, message: str = "Operation cancelled") -> None:
        super().__init__(message=message)


class PodTerminalStateError(KubernetesError):
    """Raised when a readiness wait observes a pod that will never become ready.

    Distinct from transport errors so callers can choose to recreate the pod
    instead of retrying the wait.
    """

    def __init__(
        self,
        pod_name: str,
        phase: str,
        namespace: str | None = None,
    ) -> None:
        super().__init__(
            message=f"Pod reached terminal state '{phase}'",
            resource_type="Pod",
            resource_name=pod_name,
            namespace=namespace,
        )
        self.phase = phase


class PodLogsEmptyError(KubernetesError):
    """Raised when a pod log read succeeds but returns no content."""

    def __init__(self, pod_name: str, namespace: str | None = None) -> None:
        super().__init__(
            message="No logs found",
            resource_type="Pod",
            resource_name=pod_name,
            namespace=namespace,
        )
