"""Pod readiness polling.

Polls the pod status subresource until a pod is running, fails fast on
phases a pod never comes back from, and resolves pods by short name for
ordered multi-pod waits.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from kubedev.integrations.kubernetes.exceptions import (
    KubernetesNotFoundError,
    KubernetesTimeoutError,
    OperationCancelledError,
    PodTerminalStateError,
)
from kubedev.integrations.kubernetes.models.workloads import (
    STATE_TERMINATING,
    PodStatusSnapshot,
    PodSummary,
)
from kubedev.services.kubernetes.base import K8sBaseManager
from kubedev.services.kubernetes.workload_manager import WorkloadManager

if TYPE_CHECKING:
    from kubedev.integrations.kubernetes.client import KubernetesClient

DEFAULT_POLL_INTERVAL = 2.0

READY_PHASES = frozenset({"Ready", "Running"})
TERMINAL_PHASES = frozenset({"Completed", "Succeeded", "Failed", STATE_TERMINATING})


class ReadinessManager(K8sBaseManager):
    """Waits for pods to become ready."""

    _entity_name = "readiness"

    def __init__(
        self, client: KubernetesClient, *, workloads: WorkloadManager | None = None
    ) -> None:
        super().__init__(client)
        self._workloads = workloads or WorkloadManager(client)

    def wait_for_pod_ready(
        self,
        name: str,
        namespace: str | None = None,
        *,
        interval: float = DEFAULT_POLL_INTERVAL,
        timeout: float | None = None,
        cancel: threading.Event | None = None,
    ) -> PodStatusSnapshot:
        """Poll a pod's status until it is running.

        Each round fetches the status once. A ready phase returns right
        away; a terminal phase (or a pod being deleted) raises without
        fetching again; anything else sleeps ``interval`` seconds.

        Args:
            name: Pod name.
            namespace: Target namespace.
            interval: Seconds between status fetches.
            timeout: Give up after this many seconds (None waits forever).
            cancel: Set this event to abort the wait.

        Returns:
            The status snapshot that satisfied the wait.

        Raises:
            PodTerminalStateError: The pod will never become ready.
            KubernetesTimeoutError: ``timeout`` elapsed first.
            OperationCancelledError: ``cancel`` was set.
            KubernetesError: The status fetch failed.
        """
        ns = self._resolve_namespace(namespace)
        cancel = cancel or threading.Event()
        deadline = None if timeout is None else time.monotonic() + timeout
        self._log.debug("waiting_for_pod", name=name, namespace=ns, timeout=timeout)

        while True:
            if cancel.is_set():
                raise OperationCancelledError(f"Wait for pod '{name}' cancelled")

            snapshot = self._workloads.get_pod_status(name, ns)
            phase = STATE_TERMINATING if snapshot.terminating else snapshot.phase

            if phase in TERMINAL_PHASES:
                self._log.warning("pod_terminal", name=name, namespace=ns, phase=phase)
                raise PodTerminalStateError(name, phase, ns)
            if phase in READY_PHASES:
                self._log.info("pod_ready", name=name, namespace=ns, phase=phase)
                return snapshot

            delay = interval
            if deadline is not None:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    raise KubernetesTimeoutError(
                        f"Pod '{name}' not ready, last phase {phase}",
                        timeout_seconds=timeout,
                    )
                delay = min(delay, remaining)

            self._log.debug("pod_not_ready", name=name, phase=phase, state=snapshot.last_state)
            if cancel.wait(delay):
                raise OperationCancelledError(f"Wait for pod '{name}' cancelled")

    def resolve_pod_name(
        self,
        short_name: str,
        pods: Sequence[PodSummary] | None = None,
        namespace: str | None = None,
    ) -> str:
        """Find the first pod, by sorted name, whose name contains ``short_name``.

        Raises:
            KubernetesNotFoundError: No pod name contains ``short_name``.
        """
        ns = self._resolve_namespace(namespace)
        if pods is None:
            pods = self._workloads.list_pods(ns)

        for pod in sorted(pods, key=lambda p: p.name):
            if short_name in pod.name:
                self._log.debug("resolved_pod", short_name=short_name, pod=pod.name)
                return pod.name

        raise KubernetesNotFoundError(resource_type="Pod", resource_name=short_name, namespace=ns)

    def wait_for_required_pod(
        self,
        short_name: str,
        pods: Sequence[PodSummary] | None = None,
        namespace: str | None = None,
        **wait_kwargs: Any,
    ) -> PodStatusSnapshot:
        """Resolve a pod by short name, then wait for it to be ready.

        Args:
            short_name: Substring of the pod name.
            pods: Pods to search (listed from the namespace if None).
            namespace: Target namespace.
            **wait_kwargs: Passed to ``wait_for_pod_ready``.
        """
        ns = self._resolve_namespace(namespace)
        pod_name = self.resolve_pod_name(short_name, pods, ns)
        return self.wait_for_pod_ready(pod_name, ns, **wait_kwargs)

    def wait_for_pods(
        self,
        short_names: Sequence[str],
        namespace: str | None = None,
        **wait_kwargs: Any,
    ) -> list[PodStatusSnapshot]:
        """Wait for several pods, one after the other, in the given order.

        The namespace is listed once. The first failure stops the sequence
        and propagates; later pods are never polled.
        """
        ns = self._resolve_namespace(namespace)
        pods = self._workloads.list_pods(ns)
        return [
            self.wait_for_required_pod(short_name, pods, ns, **wait_kwargs)
            for short_name in short_names
        ]
