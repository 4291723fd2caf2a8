"""Job and CronJob summaries built from batch/v1 objects."""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import Field

from kubedev.integrations.kubernetes.models.base import K8sEntityBase, _get_timestamp, _safe_get


class JobSummary(K8sEntityBase):
    """A Job reduced to its pod counters.

    Counters missing from the status (a job that has not started) read as 0.
    """

    _entity_name: ClassVar[str] = "job"

    completions: int | None = Field(
        default=None, description="spec.completions, None for work-queue jobs"
    )
    succeeded: int = Field(default=0, description="Pods that exited 0")
    failed: int = Field(default=0, description="Pods that failed")
    active: int = Field(default=0, description="Pods still running")
    start_time: str | None = Field(default=None, description="When the controller started the job")

    @classmethod
    def from_k8s_object(cls, obj: Any) -> JobSummary:
        """Build from a ``V1Job``."""
        return cls(
            **cls._metadata_fields(obj),
            completions=_safe_get(obj, "spec", "completions"),
            succeeded=_safe_get(obj, "status", "succeeded", default=0),
            failed=_safe_get(obj, "status", "failed", default=0),
            active=_safe_get(obj, "status", "active", default=0),
            start_time=_get_timestamp(_safe_get(obj, "status", "start_time")),
        )


class CronJobSummary(K8sEntityBase):
    """CronJob summary; ``active_count`` counts the jobs it currently owns."""

    _entity_name: ClassVar[str] = "cronjob"

    schedule: str = Field(default="", description="Five-field cron expression")
    suspend: bool = Field(default=False, description="True when new runs are paused")
    active_count: int = Field(default=0, description="Jobs listed in status.active")
    last_schedule_time: str | None = Field(
        default=None, description="Last time a job was scheduled"
    )

    @classmethod
    def from_k8s_object(cls, obj: Any) -> CronJobSummary:
        """Build from a ``V1CronJob``."""
        return cls(
            **cls._metadata_fields(obj),
            schedule=_safe_get(obj, "spec", "schedule", default=""),
            suspend=_safe_get(obj, "spec", "suspend", default=False),
            active_count=len(_safe_get(obj, "status", "active") or []),
            last_schedule_time=_get_timestamp(_safe_get(obj, "status", "last_schedule_time")),
        )
