"""Job and CronJob reads and deletes."""

from __future__ import annotations

from typing import Any

from kubedev.integrations.kubernetes.models.jobs import CronJobSummary, JobSummary
from kubedev.services.kubernetes.base import K8sBaseManager

BACKGROUND = "Background"


class JobManager(K8sBaseManager):
    """Manager for Kubernetes Jobs and CronJobs.

    Deletes default to background propagation so that the pods a job owns
    are garbage collected with it.
    """

    _entity_name = "job"

    # =========================================================================
    # Job Operations
    # =========================================================================

    def list_jobs(
        self,
        namespace: str | None = None,
        *,
        all_namespaces: bool = False,
        label_selector: str | None = None,
    ) -> list[JobSummary]:
        """List jobs; a dropped connection is retried before giving up."""
        ns = self._resolve_namespace(namespace)
        self._log.debug("listing_jobs", namespace=ns, all_namespaces=all_namespaces)
        kwargs: dict[str, Any] = {}
        if label_selector:
            kwargs["label_selector"] = label_selector

        if all_namespaces:
            result = self._read_with_retry(
                self._client.batch_v1.list_job_for_all_namespaces, "Job", **kwargs
            )
        else:
            result = self._read_with_retry(
                self._client.batch_v1.list_namespaced_job, "Job", ns, namespace=ns, **kwargs
            )

        items = [JobSummary.from_k8s_object(j) for j in result.items]
        self._log.debug("listed_jobs", count=len(items))
        return items

    def get_job(self, name: str, namespace: str | None = None) -> JobSummary:
        """Read one job, including its active, succeeded and failed pod counts."""
        ns = self._resolve_namespace(namespace)
        self._log.debug("getting_job", name=name, namespace=ns)
        try:
            result = self._client.batch_v1.read_namespaced_job(name=name, namespace=ns)
            return JobSummary.from_k8s_object(result)
        except Exception as e:
            self._handle_api_error(e, "Job", name, ns)

    def delete_job(
        self,
        name: str,
        namespace: str | None = None,
        *,
        propagation_policy: str = BACKGROUND,
    ) -> None:
        """Delete a job.

        Args:
            name: Job name.
            namespace: Namespace of the job; the session default when omitted.
            propagation_policy: ``Background`` removes the job pods after the job,
                ``Foreground`` before it and ``Orphan`` leaves them running.
        """
        from kubernetes.client import V1DeleteOptions

        ns = self._resolve_namespace(namespace)
        self._log.info("deleting_job", name=name, namespace=ns)
        try:
            self._client.batch_v1.delete_namespaced_job(
                name=name,
                namespace=ns,
                body=V1DeleteOptions(propagation_policy=propagation_policy),
            )
            self._log.info("deleted_job", name=name, namespace=ns)
        except Exception as e:
            self._handle_api_error(e, "Job", name, ns)

    # =========================================================================
    # CronJob Operations
    # =========================================================================

    def list_cron_jobs(
        self,
        namespace: str | None = None,
        *,
        all_namespaces: bool = False,
        label_selector: str | None = None,
    ) -> list[CronJobSummary]:
        """List cron jobs with their schedule and last run time."""
        ns = self._resolve_namespace(namespace)
        self._log.debug("listing_cronjobs", namespace=ns, all_namespaces=all_namespaces)
        kwargs: dict[str, Any] = {}
        if label_selector:
            kwargs["label_selector"] = label_selector

        if all_namespaces:
            result = self._read_with_retry(
                self._client.batch_v1.list_cron_job_for_all_namespaces, "CronJob", **kwargs
            )
        else:
            result = self._read_with_retry(
                self._client.batch_v1.list_namespaced_cron_job,
                "CronJob",
                ns,
                namespace=ns,
                **kwargs,
            )

        items = [CronJobSummary.from_k8s_object(cj) for cj in result.items]
        self._log.debug("listed_cronjobs", count=len(items))
        return items

    def get_cron_job(self, name: str, namespace: str | None = None) -> CronJobSummary:
        """Read one cron job."""
        ns = self._resolve_namespace(namespace)
        self._log.debug("getting_cronjob", name=name, namespace=ns)
        try:
            result = self._client.batch_v1.read_namespaced_cron_job(name=name, namespace=ns)
            return CronJobSummary.from_k8s_object(result)
        except Exception as e:
            self._handle_api_error(e, "CronJob", name, ns)

    def delete_cron_job(
        self,
        name: str,
        namespace: str | None = None,
        *,
        propagation_policy: str = BACKGROUND,
    ) -> None:
        """Delete a cronjob together with the jobs it spawned."""
        from kubernetes.client import V1DeleteOptions

        ns = self._resolve_namespace(namespace)
        self._log.info("deleting_cronjob", name=name, namespace=ns)
        try:
            self._client.batch_v1.delete_namespaced_cron_job(
                name=name,
                namespace=ns,
                body=V1DeleteOptions(propagation_policy=propagation_policy),
            )
            self._log.info("deleted_cronjob", name=name, namespace=ns)
        except Exception as e:
            self._handle_api_error(e, "CronJob", name, ns)
