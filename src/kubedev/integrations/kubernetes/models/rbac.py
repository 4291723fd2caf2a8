"""Service account summary."""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import Field

from kubedev.integrations.kubernetes.models.base import K8sEntityBase


class ServiceAccountSummary(K8sEntityBase):
    """A service account and how many token secrets are attached to it."""

    _entity_name: ClassVar[str] = "serviceaccount"

    secrets_count: int = Field(default=0, description="Entries in the secrets list")
    automount_token: bool | None = Field(
        default=None, description="automountServiceAccountToken, None when unset"
    )

    @classmethod
    def from_k8s_object(cls, obj: Any) -> ServiceAccountSummary:
        """Build from a ``V1ServiceAccount``."""
        return cls(
            **cls._metadata_fields(obj),
            secrets_count=len(getattr(obj, "secrets", None) or []),
            automount_token=getattr(obj, "automount_service_account_token", None),
        )
