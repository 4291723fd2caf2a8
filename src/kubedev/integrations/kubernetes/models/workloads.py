"""Pod and controller summaries, plus the status labels shared by pods and containers."""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field
from rich.text import Text

from kubedev.integrations.kubernetes.models.base import K8sEntityBase, _safe_get

# Labels for a V1ContainerState; a terminated container reads as Terminating.
STATE_RUNNING = "Running"
STATE_TERMINATING = "Terminating"
STATE_WAITING = "Waiting"
STATE_UNKNOWN = "Unknown"

_STATUS_STYLES = {
    "Running": "bright_green",
    "Succeeded": "green",
    "Failed": "red",
    "Terminating": "red",
    "Terminated": "red",
}


def colorize_status(status: str | None) -> Text:
    """Render a phase or container state label with its display color."""
    if not status:
        return Text(STATE_UNKNOWN)
    return Text(status, style=_STATUS_STYLES.get(status, ""))


def find_state(state: Any) -> str:
    """Label a kubernetes V1ContainerState."""
    if state is None:
        return STATE_UNKNOWN
    if getattr(state, "running", None):
        return STATE_RUNNING
    if getattr(state, "terminated", None):
        return STATE_TERMINATING
    if getattr(state, "waiting", None):
        return STATE_WAITING
    return STATE_UNKNOWN


class ContainerStatus(K8sEntityBase):
    """Per-container status; ``state`` carries the waiting or terminated reason."""

    _entity_name: ClassVar[str] = "container"

    image: str | None = Field(
        default=None, description="Image reference as reported by the kubelet"
    )
    ready: bool = Field(default=False, description="Readiness probe passing")
    restart_count: int = Field(default=0, description="Restarts since the pod started")
    state: str = Field(
        default="unknown", description="running, or the waiting or terminated reason"
    )

    @classmethod
    def from_k8s_object(cls, obj: Any) -> ContainerStatus:
        """Build from a ``V1ContainerStatus``."""
        state = "unknown"
        if obj_state := getattr(obj, "state", None):
            if getattr(obj_state, "running", None):
                state = "running"
            elif getattr(obj_state, "waiting", None):
                state = str(_safe_get(obj_state, "waiting", "reason", default="Waiting"))
            elif getattr(obj_state, "terminated", None):
                state = str(_safe_get(obj_state, "terminated", "reason", default="Terminated"))

        return cls(
            name=getattr(obj, "name", ""),
            image=getattr(obj, "image", None),
            ready=getattr(obj, "ready", False) or False,
            restart_count=getattr(obj, "restart_count", 0) or 0,
            state=state,
        )


class PodSummary(K8sEntityBase):
    """A pod with its container names in spec order.

    ``ready`` renders as ``ready_count/total_count`` the way the pod list shows it.
    """

    _entity_name: ClassVar[str] = "pod"

    phase: str = Field(default="Unknown", description="status.phase")
    node_name: str | None = Field(default=None, description="Node the pod is bound to")
    pod_ip: str | None = Field(default=None, description="status.podIP")
    restarts: int = Field(default=0, description="Sum of container restart counts")
    ready_count: int = Field(default=0, description="Containers reporting ready")
    container_names: list[str] = Field(
        default_factory=list, description="Container names in spec order"
    )
    containers: list[ContainerStatus] = Field(
        default_factory=list, description="Statuses of started containers"
    )

    @property
    def total_count(self) -> int:
        """Number of containers declared in the pod spec."""
        return len(self.container_names)

    @property
    def ready(self) -> str:
        return f"{self.ready_count}/{self.total_count}"

    @property
    def phase_text(self) -> Text:
        return colorize_status(self.phase)

    @classmethod
    def from_k8s_object(cls, obj: Any) -> PodSummary:
        """Build from a ``V1Pod``."""
        container_statuses = _safe_get(obj, "status", "container_statuses") or []
        containers = [ContainerStatus.from_k8s_object(cs) for cs in container_statuses]
        spec_containers = _safe_get(obj, "spec", "containers") or []

        return cls(
            **cls._metadata_fields(obj),
            phase=_safe_get(obj, "status", "phase", default="Unknown"),
            node_name=_safe_get(obj, "spec", "node_name"),
            pod_ip=_safe_get(obj, "status", "pod_ip"),
            restarts=sum(c.restart_count for c in containers),
            ready_count=sum(1 for c in containers if c.ready),
            container_names=[getattr(c, "name", "") or "" for c in spec_containers],
            containers=containers,
        )


class PodStatusSnapshot(BaseModel):
    """Point-in-time status of a pod, recomputed on every poll."""

    model_config = ConfigDict(extra="ignore")

    pod_name: str
    namespace: str | None = None
    phase: str = "Unknown"
    last_state: str = STATE_UNKNOWN
    terminating: bool = False

    @property
    def phase_text(self) -> Text:
        return colorize_status(STATE_TERMINATING if self.terminating else self.phase)

    @property
    def last_state_text(self) -> Text:
        return colorize_status(self.last_state)

    @classmethod
    def from_k8s_object(cls, obj: Any) -> PodStatusSnapshot:
        """Create from a kubernetes V1Pod returned by a status read.

        The container state label comes from the last container status.
        """
        statuses = _safe_get(obj, "status", "container_statuses") or []
        last_state = find_state(getattr(statuses[-1], "state", None)) if statuses else STATE_UNKNOWN
        return cls(
            pod_name=_safe_get(obj, "metadata", "name", default=""),
            namespace=_safe_get(obj, "metadata", "namespace"),
            phase=_safe_get(obj, "status", "phase", default="Unknown"),
            last_state=last_state,
            terminating=_safe_get(obj, "metadata", "deletion_timestamp") is not None,
        )


class DeploymentSummary(K8sEntityBase):
    """Deployment replica counters and the images of its pod template."""

    _entity_name: ClassVar[str] = "deployment"

    replicas: int = Field(default=0, description="spec.replicas")
    ready_replicas: int = Field(default=0, description="Pods passing readiness")
    available_replicas: int = Field(default=0, description="Ready for at least minReadySeconds")
    updated_replicas: int = Field(default=0, description="Pods on the current template")
    strategy: str | None = Field(default=None, description="RollingUpdate or Recreate")
    images: list[str] = Field(default_factory=list, description="Container images")

    @classmethod
    def from_k8s_object(cls, obj: Any) -> DeploymentSummary:
        """Build from a ``V1Deployment``."""
        containers = _safe_get(obj, "spec", "template", "spec", "containers") or []
        return cls(
            **cls._metadata_fields(obj),
            replicas=_safe_get(obj, "spec", "replicas", default=0),
            ready_replicas=_safe_get(obj, "status", "ready_replicas", default=0),
            available_replicas=_safe_get(obj, "status", "available_replicas", default=0),
            updated_replicas=_safe_get(obj, "status", "updated_replicas", default=0),
            strategy=_safe_get(obj, "spec", "strategy", "type"),
            images=[c.image for c in containers if getattr(c, "image", None)],
        )


class ScaleSummary(K8sEntityBase):
    """Result of a scale subresource write."""

    _entity_name: ClassVar[str] = "scale"

    replicas: int = Field(default=0, description="Requested replicas")
    current_replicas: int = Field(default=0, description="Observed replicas")

    @classmethod
    def from_k8s_object(cls, obj: Any) -> ScaleSummary:
        """Build from a ``V1Scale``."""
        return cls(
            **cls._metadata_fields(obj),
            replicas=_safe_get(obj, "spec", "replicas", default=0),
            current_replicas=_safe_get(obj, "status", "replicas", default=0),
        )


class StatefulSetSummary(K8sEntityBase):
    """StatefulSet replica counters and its governing headless service."""

    _entity_name: ClassVar[str] = "statefulset"

    replicas: int = Field(default=0, description="spec.replicas")
    ready_replicas: int = Field(default=0, description="Pods passing readiness")
    service_name: str | None = Field(
        default=None, description="Headless service giving pods stable DNS"
    )

    @classmethod
    def from_k8s_object(cls, obj: Any) -> StatefulSetSummary:
        """Build from a ``V1StatefulSet``."""
        return cls(
            **cls._metadata_fields(obj),
            replicas=_safe_get(obj, "spec", "replicas", default=0),
            ready_replicas=_safe_get(obj, "status", "ready_replicas", default=0),
            service_name=_safe_get(obj, "spec", "service_name"),
        )


class DaemonSetSummary(K8sEntityBase):
    """DaemonSet node coverage."""

    _entity_name: ClassVar[str] = "daemonset"

    desired_number_scheduled: int = Field(default=0, description="Nodes that should run a pod")
    current_number_scheduled: int = Field(default=0, description="Nodes running a pod")
    number_ready: int = Field(default=0, description="Nodes with a ready pod")

    @classmethod
    def from_k8s_object(cls, obj: Any) -> DaemonSetSummary:
        """Build from a ``V1DaemonSet``."""
        return cls(
            **cls._metadata_fields(obj),
            desired_number_scheduled=_safe_get(
                obj, "status", "desired_number_scheduled", default=0
            ),
            current_number_scheduled=_safe_get(
                obj, "status", "current_number_scheduled", default=0
            ),
            number_ready=_safe_get(obj, "status", "number_ready", default=0),
        )
