"""Cluster-level display models: contexts, namespaces and events."""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field

from kubedev.integrations.kubernetes.models.base import K8sEntityBase, _get_timestamp, _safe_get


class ClusterContext(BaseModel):
    """A named kubeconfig context."""

    model_config = ConfigDict(extra="ignore")

    name: str = Field(description="Context name")
    cluster: str | None = Field(default=None, description="Cluster the context points at")
    user: str | None = Field(default=None, description="Kubeconfig user")
    namespace: str | None = Field(default=None, description="Context default namespace")

    @classmethod
    def from_kubeconfig(cls, entry: dict[str, Any]) -> ClusterContext:
        """Create from a context entry of ``kubernetes.config.list_kube_config_contexts``."""
        context = entry.get("context") or {}
        return cls(
            name=entry.get("name", ""),
            cluster=context.get("cluster"),
            user=context.get("user"),
            namespace=context.get("namespace"),
        )


class NamespaceSummary(K8sEntityBase):
    """A namespace and its phase; ``namespace`` is always None."""

    _entity_name: ClassVar[str] = "namespace"

    status: str = Field(default="Active", description="Active or Terminating")

    @classmethod
    def from_k8s_object(cls, obj: Any) -> NamespaceSummary:
        """Build from a ``V1Namespace``."""
        fields = cls._metadata_fields(obj)
        fields.pop("namespace")
        return cls(**fields, status=_safe_get(obj, "status", "phase", default="Active"))


class EventSummary(K8sEntityBase):
    """Event display model.

    Accepts both ``events.k8s.io/v1`` events (``note``, ``regarding``,
    ``deprecated_count``) and legacy core/v1 events (``message``,
    ``involved_object``, ``count``).
    """

    _entity_name: ClassVar[str] = "event"

    type: str = Field(default="Normal", description="Normal or Warning")
    reason: str | None = Field(default=None, description="Short machine-readable cause")
    message: str | None = Field(
        default=None, description="note on events.k8s.io/v1, message on core/v1"
    )
    source_component: str | None = Field(default=None, description="Reporting component")
    last_timestamp: str | None = Field(default=None, description="eventTime, else lastTimestamp")
    count: int = Field(default=1, description="Times the event was seen")
    involved_object_kind: str | None = Field(
        default=None, description="Kind of the object the event is about"
    )
    involved_object_name: str | None = Field(
        default=None, description="Name of the object the event is about"
    )

    @classmethod
    def from_k8s_object(cls, obj: Any) -> EventSummary:
        """Create from an EventsV1Event or a CoreV1Event."""
        involved = getattr(obj, "regarding", None) or getattr(obj, "involved_object", None)
        message = getattr(obj, "note", None) or getattr(obj, "message", None)
        count = getattr(obj, "deprecated_count", None) or getattr(obj, "count", None) or 1
        last_seen = (
            getattr(obj, "event_time", None)
            or getattr(obj, "deprecated_last_timestamp", None)
            or getattr(obj, "last_timestamp", None)
        )
        source = getattr(obj, "reporting_controller", None) or _safe_get(
            obj, "source", "component"
        )

        return cls(
            **cls._metadata_fields(obj),
            type=getattr(obj, "type", "Normal") or "Normal",
            reason=getattr(obj, "reason", None),
            message=message,
            source_component=source,
            last_timestamp=_get_timestamp(last_seen),
            count=count,
            involved_object_kind=_safe_get(involved, "kind"),
            involved_object_name=_safe_get(involved, "name"),
        )
