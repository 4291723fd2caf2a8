"""Kubernetes integration configuration models."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, field_validator

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "kubedev" / "config.yaml"


class ClusterConfig(BaseModel):
    """Configuration for a single named cluster."""

    model_config = ConfigDict(extra="forbid")

    context: str = ""
    kubeconfig: str | None = None
    namespace: str = "default"
    timeout: int = 300

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: int) -> int:
        """Validate timeout is positive."""
        if v <= 0:
            raise ValueError("timeout must be positive")
        return v

    @field_validator("kubeconfig")
    @classmethod
    def validate_kubeconfig(cls, v: str | None) -> str | None:
        """Expand ~ in kubeconfig path."""
        return str(Path(v).expanduser()) if v else None


class KubernetesDefaultsConfig(BaseModel):
    """Default settings for kubedev operations."""

    model_config = ConfigDict(extra="forbid")

    timeout: int = 300
    retry_attempts: int = 3
    poll_interval: float = 2.0
    log_since_seconds: int = 120
    shell: str = "bash"

    @field_validator("timeout", "log_since_seconds")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        """Validate timeouts and windows are positive."""
        if v <= 0:
            raise ValueError("value must be positive")
        return v

    @field_validator("poll_interval")
    @classmethod
    def validate_poll_interval(cls, v: float) -> float:
        """Validate poll interval is positive."""
        if v <= 0:
            raise ValueError("poll_interval must be positive")
        return v

    @field_validator("retry_attempts")
    @classmethod
    def validate_retry_attempts(cls, v: int) -> int:
        """Validate retry_attempts is at least one."""
        if v < 1:
            raise ValueError("retry_attempts must be at least 1")
        return v


class KubernetesPluginConfig(BaseModel):
    """Complete kubedev configuration."""

    model_config = ConfigDict(extra="forbid")

    clusters: dict[str, ClusterConfig] = {}
    active_cluster: str | None = None
    defaults: KubernetesDefaultsConfig = KubernetesDefaultsConfig()
    kubeconfig_override: str | None = None
    namespace_override: str | None = None

    @classmethod
    def from_file(cls, path: str | Path | None = None) -> KubernetesPluginConfig:
        """Load configuration from a YAML file, then apply environment overrides.

        A missing file yields the default configuration.

        Args:
            path: Config file path (defaults to ~/.config/kubedev/config.yaml).
        """
        config_path = Path(path).expanduser() if path else DEFAULT_CONFIG_PATH
        base_config: dict[str, Any] = {}
        if config_path.exists():
            with config_path.open() as f:
                base_config = yaml.safe_load(f) or {}
        return cls.from_env(base_config)

    @classmethod
    def from_env(cls, base_config: dict[str, Any] | None = None) -> KubernetesPluginConfig:
        """Create configuration with environment variable overrides.

        Supported environment variables:
            KUBEDEV_CONTEXT: Active context or named cluster
            KUBEDEV_NAMESPACE: Default namespace for every cluster
            KUBEDEV_KUBECONFIG: Kubeconfig path for every cluster
            KUBEDEV_TIMEOUT: Default timeout in seconds
            KUBEDEV_POLL_INTERVAL: Readiness poll interval in seconds
            KUBEDEV_SHELL: Shell used by exec sessions
        """
        config_dict = dict(base_config) if base_config else {}
        defaults = dict(config_dict.get("defaults") or {})

        if context := os.environ.get("KUBEDEV_CONTEXT"):
            config_dict["active_cluster"] = context
        if timeout := os.environ.get("KUBEDEV_TIMEOUT"):
            defaults["timeout"] = int(timeout)
        if poll_interval := os.environ.get("KUBEDEV_POLL_INTERVAL"):
            defaults["poll_interval"] = float(poll_interval)
        if shell := os.environ.get("KUBEDEV_SHELL"):
            defaults["shell"] = shell
        config_dict["defaults"] = defaults

        instance = cls.model_validate(config_dict)

        if kubeconfig := os.environ.get("KUBEDEV_KUBECONFIG"):
            instance.kubeconfig_override = str(Path(kubeconfig).expanduser())
            for cluster_cfg in instance.clusters.values():
                cluster_cfg.kubeconfig = instance.kubeconfig_override
        if namespace := os.environ.get("KUBEDEV_NAMESPACE"):
            instance.namespace_override = namespace
            for cluster_cfg in instance.clusters.values():
                cluster_cfg.namespace = namespace

        return instance

    def resolve_cluster(self, name: str | None) -> tuple[str | None, str | None]:
        """Resolve a context or named cluster to ``(context, kubeconfig)``.

        Names found in ``clusters`` map to their configured context and
        kubeconfig; anything else is treated as a raw kubeconfig context.
        """
        if name and (cluster := self.clusters.get(name)):
            return cluster.context or None, cluster.kubeconfig
        return name, self.kubeconfig_override

    def get_active_context(self) -> str | None:
        """Get the active context name, or None for the kubeconfig default."""
        if self.active_cluster:
            return self.resolve_cluster(self.active_cluster)[0]
        if self.clusters:
            first = next(iter(self.clusters.values()))
            return first.context or None
        return None

    def get_active_kubeconfig(self) -> str | None:
        """Get the kubeconfig path for the active cluster."""
        if self.active_cluster:
            return self.resolve_cluster(self.active_cluster)[1]
        if self.clusters:
            return next(iter(self.clusters.values())).kubeconfig
        return self.kubeconfig_override

    def _cluster(self, name: str | None) -> ClusterConfig | None:
        if name:
            return self.clusters.get(name)
        return next(iter(self.clusters.values()), None)

    def get_cluster_namespace(self, name: str | None, context_namespace: str | None = None) -> str:
        """Get the default namespace for a named cluster or raw context.

        Raw kubeconfig contexts use ``KUBEDEV_NAMESPACE``, then the
        namespace set on the kubeconfig context, then ``default``.
        """
        if cluster := self._cluster(name):
            return cluster.namespace
        return self.namespace_override or context_namespace or "default"

    def get_cluster_timeout(self, name: str | None) -> int:
        """Get the timeout for a named cluster, or the default timeout."""
        if cluster := self._cluster(name):
            return cluster.timeout
        return self.defaults.timeout

    def get_active_namespace(self) -> str:
        """Get the default namespace for the active cluster."""
        return self.get_cluster_namespace(self.active_cluster)

    def get_active_timeout(self) -> int:
        """Get the timeout for the active cluster."""
        return self.get_cluster_timeout(self.active_cluster)
