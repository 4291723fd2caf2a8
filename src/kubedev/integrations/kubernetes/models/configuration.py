"""ConfigMap and Secret summaries. Both expose key names only."""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import Field

from kubedev.integrations.kubernetes.models.base import K8sEntityBase


class ConfigMapSummary(K8sEntityBase):
    """ConfigMap keys, sorted; values are left out of the summary."""

    _entity_name: ClassVar[str] = "configmap"

    data_keys: list[str] = Field(default_factory=list, description="Keys of data")
    binary_data_keys: list[str] = Field(default_factory=list, description="Keys of binaryData")

    @classmethod
    def from_k8s_object(cls, obj: Any) -> ConfigMapSummary:
        """Build from a ``V1ConfigMap``."""
        data = getattr(obj, "data", None) or {}
        binary_data = getattr(obj, "binary_data", None) or {}

        return cls(
            **cls._metadata_fields(obj),
            data_keys=sorted(data.keys()),
            binary_data_keys=sorted(binary_data.keys()),
        )


class SecretSummary(K8sEntityBase):
    """Secret type and key names.

    Values are never copied out of the API response, so printing a summary
    cannot leak secret data.
    """

    _entity_name: ClassVar[str] = "secret"

    type: str = Field(default="Opaque", description="Opaque, kubernetes.io/tls and so on")
    data_keys: list[str] = Field(default_factory=list, description="Keys of data, sorted")

    @classmethod
    def from_k8s_object(cls, obj: Any) -> SecretSummary:
        """Build from a ``V1Secret``."""
        data = getattr(obj, "data", None) or {}

        return cls(
            **cls._metadata_fields(obj),
            type=getattr(obj, "type", "Opaque") or "Opaque",
            data_keys=sorted(data.keys()),
        )
