"""Shared pydantic base and attribute helpers for kubedev resource summaries."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field


class K8sEntityBase(BaseModel):
    """Common metadata of every kubedev summary model.

    Subclasses build themselves from kubernetes client objects through
    ``from_k8s_object``. Unknown fields are ignored.
    """

    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    name: str = Field(description="metadata.name")
    namespace: str | None = Field(default=None, description="None for cluster scoped resources")
    uid: str | None = Field(default=None, description="metadata.uid")
    creation_timestamp: str | None = Field(default=None, description="ISO 8601 creation time")
    labels: dict[str, str] | None = Field(
        default=None, description="metadata.labels, None when empty"
    )
    annotations: dict[str, str] | None = Field(
        default=None, description="metadata.annotations, None when empty"
    )

    _entity_name: ClassVar[str] = "entity"

    @classmethod
    def _metadata_fields(cls, obj: Any) -> dict[str, Any]:
        """Name, namespace, uid, timestamps, labels and annotations of ``obj``."""
        return {
            "name": _safe_get(obj, "metadata", "name", default=""),
            "namespace": _safe_get(obj, "metadata", "namespace"),
            "uid": _safe_get(obj, "metadata", "uid"),
            "creation_timestamp": _get_timestamp(
                _safe_get(obj, "metadata", "creation_timestamp")
            ),
            "labels": _get_labels(obj),
            "annotations": _get_annotations(obj),
        }

    @property
    def age(self) -> str:
        """Age as ``5d``, ``3h`` or ``12m``, or ``Unknown`` without a timestamp."""
        if not self.creation_timestamp:
            return "Unknown"
        try:
            created = datetime.fromisoformat(self.creation_timestamp.replace("Z", "+00:00"))
            delta = datetime.now(UTC) - created
            hours, remainder = divmod(delta.seconds, 3600)
            if delta.days > 0:
                return f"{delta.days}d"
            if hours > 0:
                return f"{hours}h"
            return f"{remainder // 60}m"
        except (ValueError, TypeError):
            return "Unknown"


def _safe_get(obj: Any, *attrs: str, default: Any = None) -> Any:
    """Follow ``attrs`` on ``obj``, returning ``default`` at the first None."""
    current = obj
    for attr in attrs:
        if current is None:
            return default
        current = getattr(current, attr, None)
    return current if current is not None else default


def _get_timestamp(obj: Any) -> str | None:
    """ISO 8601 text for a datetime; strings pass through unchanged."""
    if obj is None:
        return None
    if isinstance(obj, str):
        return obj
    if isinstance(obj, datetime):
        return obj.isoformat()
    return str(obj)


def _get_labels(obj: Any) -> dict[str, str] | None:
    labels = _safe_get(obj, "metadata", "labels")
    return dict(labels) if labels else None


def _get_annotations(obj: Any) -> dict[str, str] | None:
    annotations = _safe_get(obj, "metadata", "annotations")
    return dict(annotations) if annotations else None
