"""Resource kinds accepted by the generic delete operation."""

from __future__ import annotations

from enum import StrEnum


class ResourceKind(StrEnum):
    """Kinds that ``ResourceManager.delete_resource`` can dispatch on."""

    PODS = "pods"
    NAMESPACES = "namespaces"
    DEPLOYMENTS = "deployments"
    DAEMONSETS = "daemonsets"
    STATEFULSETS = "statefulsets"
    SERVICES = "services"
    SECRETS = "secrets"
    CONFIG_MAPS = "configMaps"
    SERVICE_ACCOUNTS = "serviceAccounts"
    JOBS = "jobs"
    CRON_JOBS = "cronJobs"
