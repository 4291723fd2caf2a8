"""Kubernetes configuration resource manager.

Manages ConfigMaps and Secrets through the Kubernetes API.
Secret values are never exposed in display models.

The ``*_from_files`` and ``create_or_update_*`` helpers derive the
resource name with ``to_kebab_case``. Create-or-update is a check then act
sequence: a concurrent writer can still win between the existence scan and
the write, in which case the create or replace call fails with the
translated API error.
"""

from __future__ import annotations

import base64
from collections.abc import Mapping
from pathlib import Path
from typing import IO, Any

from kubedev.integrations.kubernetes.models.configuration import (
    ConfigMapSummary,
    SecretSummary,
)
from kubedev.services.kubernetes.base import K8sBaseManager
from kubedev.utils.naming import to_kebab_case

MERGE_PATCH = "application/merge-patch+json"

FileSource = str | Path | IO[str] | IO[bytes]


def _encode(value: str) -> str:
    return base64.b64encode(value.encode("utf-8")).decode("ascii")


def _read_source(source: FileSource) -> str:
    """Read a whole file source into a string.

    Paths are read from disk; open streams are drained.
    """
    if isinstance(source, str | Path):
        return Path(source).read_text(encoding="utf-8")
    content = source.read()
    if isinstance(content, bytes):
        return content.decode("utf-8")
    return content


class ConfigurationManager(K8sBaseManager):
    """Manager for Kubernetes configuration resources."""

    _entity_name = "configuration"

    # =========================================================================
    # ConfigMap Operations
    # =========================================================================

    def list_config_maps(
        self,
        namespace: str | None = None,
        *,
        all_namespaces: bool = False,
        label_selector: str | None = None,
    ) -> list[ConfigMapSummary]:
        """List configmaps.

        Args:
            namespace: Target namespace.
            all_namespaces: List across all namespaces.
            label_selector: Filter by label selector.

        Returns:
            List of configmap summaries.
        """
        ns = self._resolve_namespace(namespace)
        self._log.debug("listing_configmaps", namespace=ns)
        kwargs: dict[str, Any] = {}
        if label_selector:
            kwargs["label_selector"] = label_selector

        if all_namespaces:
            result = self._read_with_retry(
                self._client.core_v1.list_config_map_for_all_namespaces, "ConfigMap", **kwargs
            )
        else:
            result = self._read_with_retry(
                self._client.core_v1.list_namespaced_config_map,
                "ConfigMap",
                ns,
                namespace=ns,
                **kwargs,
            )

        items = [ConfigMapSummary.from_k8s_object(cm) for cm in result.items]
        self._log.debug("listed_configmaps", count=len(items))
        return items

    def get_config_map(self, name: str, namespace: str | None = None) -> ConfigMapSummary:
        """Get a single configmap by name (keys only)."""
        ns = self._resolve_namespace(namespace)
        self._log.debug("getting_configmap", name=name, namespace=ns)
        try:
            result = self._client.core_v1.read_namespaced_config_map(name=name, namespace=ns)
            return ConfigMapSummary.from_k8s_object(result)
        except Exception as e:
            self._handle_api_error(e, "ConfigMap", name, ns)

    def get_config_map_data(self, name: str, namespace: str | None = None) -> dict[str, str]:
        """Get the data values of a configmap."""
        ns = self._resolve_namespace(namespace)
        self._log.debug("getting_configmap_data", name=name, namespace=ns)
        try:
            result = self._client.core_v1.read_namespaced_config_map(name=name, namespace=ns)
            return dict(result.data or {})
        except Exception as e:
            self._handle_api_error(e, "ConfigMap", name, ns)

    def config_map_exists(self, name: str, namespace: str | None = None) -> bool:
        """Whether a configmap named ``to_kebab_case(name)`` exists.

        Scans the namespace listing rather than reading by name, so a missing
        configmap is a ``False`` result and never a not-found error.
        """
        ns = self._resolve_namespace(namespace)
        wanted = to_kebab_case(name)
        result = self._read_with_retry(
            self._client.core_v1.list_namespaced_config_map, "ConfigMap", ns, namespace=ns
        )
        return any(getattr(item.metadata, "name", None) == wanted for item in result.items)

    def create_config_map(
        self, name: str, value: str, namespace: str | None = None
    ) -> ConfigMapSummary:
        """Create a single-key configmap ``{name: value}`` named ``to_kebab_case(name)``."""
        return self._create_config_map(to_kebab_case(name), {name: value}, namespace)

    def create_config_map_from_files(
        self,
        name: str,
        files: Mapping[str, FileSource],
        namespace: str | None = None,
    ) -> ConfigMapSummary:
        """Create a configmap with one key per file.

        Args:
            name: Logical name, converted to kebab case for the resource.
            files: Key (usually the file name) to path or open stream.
            namespace: Target namespace.

        Raises:
            OSError: If a file source cannot be read. Nothing is created.
        """
        data = {key: _read_source(source) for key, source in files.items()}
        return self._create_config_map(to_kebab_case(name), data, namespace)

    def update_config_map_from_files(
        self,
        name: str,
        files: Mapping[str, FileSource],
        namespace: str | None = None,
    ) -> ConfigMapSummary:
        """Replace a configmap's data with one key per file.

        Keys not present in ``files`` are removed.
        """
        from kubernetes.client import V1ConfigMap, V1ObjectMeta

        data = {key: _read_source(source) for key, source in files.items()}
        ns = self._resolve_namespace(namespace)
        resource_name = to_kebab_case(name)
        body = V1ConfigMap(
            metadata=V1ObjectMeta(name=resource_name, namespace=ns),
            data=data,
        )

        self._log.info("replacing_configmap", name=resource_name, namespace=ns, keys=len(data))
        try:
            result = self._client.core_v1.replace_namespaced_config_map(
                name=resource_name, namespace=ns, body=body
            )
            self._log.info("replaced_configmap", name=resource_name, namespace=ns)
            return ConfigMapSummary.from_k8s_object(result)
        except Exception as e:
            self._handle_api_error(e, "ConfigMap", resource_name, ns)

    def create_or_update_config_map_from_files(
        self,
        name: str,
        files: Mapping[str, FileSource],
        namespace: str | None = None,
    ) -> ConfigMapSummary:
        """Create the configmap, or replace its data if it already exists.

        Best effort: existence is checked first and the outcome decides
        between exactly one create and exactly one replace.
        """
        if self.config_map_exists(name, namespace):
            return self.update_config_map_from_files(name, files, namespace)
        return self.create_config_map_from_files(name, files, namespace)

    def update_config_map(
        self,
        name: str,
        data: dict[str, str],
        namespace: str | None = None,
    ) -> ConfigMapSummary:
        """Merge ``data`` into a configmap (JSON merge patch).

        Existing keys not named in ``data`` are kept. The name is used as is.
        """
        ns = self._resolve_namespace(namespace)
        self._log.info("updating_configmap", name=name, namespace=ns)
        try:
            result = self._client.core_v1.patch_namespaced_config_map(
                name=name,
                namespace=ns,
                body={"data": data},
                _content_type=MERGE_PATCH,
            )
            self._log.info("updated_configmap", name=name, namespace=ns)
            return ConfigMapSummary.from_k8s_object(result)
        except Exception as e:
            self._handle_api_error(e, "ConfigMap", name, ns)

    def delete_config_map(self, name: str, namespace: str | None = None) -> None:
        """Delete a configmap."""
        ns = self._resolve_namespace(namespace)
        self._log.info("deleting_configmap", name=name, namespace=ns)
        try:
            self._client.core_v1.delete_namespaced_config_map(name=name, namespace=ns)
            self._log.info("deleted_configmap", name=name, namespace=ns)
        except Exception as e:
            self._handle_api_error(e, "ConfigMap", name, ns)

    def _create_config_map(
        self, resource_name: str, data: dict[str, str], namespace: str | None
    ) -> ConfigMapSummary:
        from kubernetes.client import V1ConfigMap, V1ObjectMeta

        ns = self._resolve_namespace(namespace)
        body = V1ConfigMap(
            metadata=V1ObjectMeta(name=resource_name, namespace=ns),
            data=data,
        )

        self._log.info("creating_configmap", name=resource_name, namespace=ns, keys=len(data))
        try:
            result = self._client.core_v1.create_namespaced_config_map(namespace=ns, body=body)
            self._log.info("created_configmap", name=resource_name, namespace=ns)
            return ConfigMapSummary.from_k8s_object(result)
        except Exception as e:
            self._handle_api_error(e, "ConfigMap", resource_name, ns)

    # =========================================================================
    # Secret Operations
    # =========================================================================

    def list_secrets(
        self,
        namespace: str | None = None,
        *,
        all_namespaces: bool = False,
        label_selector: str | None = None,
    ) -> list[SecretSummary]:
        """List secrets (keys only, values hidden)."""
        ns = self._resolve_namespace(namespace)
        self._log.debug("listing_secrets", namespace=ns)
        kwargs: dict[str, Any] = {}
        if label_selector:
            kwargs["label_selector"] = label_selector

        if all_namespaces:
            result = self._read_with_retry(
                self._client.core_v1.list_secret_for_all_namespaces, "Secret", **kwargs
            )
        else:
            result = self._read_with_retry(
                self._client.core_v1.list_namespaced_secret, "Secret", ns, namespace=ns, **kwargs
            )

        items = [SecretSummary.from_k8s_object(s) for s in result.items]
        self._log.debug("listed_secrets", count=len(items))
        return items

    def get_secret(self, name: str, namespace: str | None = None) -> SecretSummary:
        """Get a single secret by name (keys only, values hidden)."""
        ns = self._resolve_namespace(namespace)
        self._log.debug("getting_secret", name=name, namespace=ns)
        try:
            result = self._client.core_v1.read_namespaced_secret(name=name, namespace=ns)
            return SecretSummary.from_k8s_object(result)
        except Exception as e:
            self._handle_api_error(e, "Secret", name, ns)

    def secret_exists(self, name: str, namespace: str | None = None) -> bool:
        """Whether a secret named ``to_kebab_case(name)`` exists (list + scan)."""
        ns = self._resolve_namespace(namespace)
        wanted = to_kebab_case(name)
        result = self._read_with_retry(
            self._client.core_v1.list_namespaced_secret, "Secret", ns, namespace=ns
        )
        return any(getattr(item.metadata, "name", None) == wanted for item in result.items)

    def create_secret(self, name: str, value: str, namespace: str | None = None) -> SecretSummary:
        """Create an Opaque secret ``{name: base64(value)}`` named ``to_kebab_case(name)``.

        Args:
            name: Key of the single entry; its kebab form names the secret.
            value: Plain text value, base64-encoded before sending.
            namespace: Target namespace.

        Returns:
            Created secret summary.
        """
        ns = self._resolve_namespace(namespace)
        body = self._secret_body(name, value, ns)
        resource_name = body.metadata.name

        self._log.info("creating_secret", name=resource_name, namespace=ns)
        try:
            result = self._client.core_v1.create_namespaced_secret(namespace=ns, body=body)
            self._log.info("created_secret", name=resource_name, namespace=ns)
            return SecretSummary.from_k8s_object(result)
        except Exception as e:
            self._handle_api_error(e, "Secret", resource_name, ns)

    def update_secret(self, name: str, value: str, namespace: str | None = None) -> SecretSummary:
        """Replace a secret created by ``create_secret`` with a new value."""
        ns = self._resolve_namespace(namespace)
        body = self._secret_body(name, value, ns)
        resource_name = body.metadata.name

        self._log.info("replacing_secret", name=resource_name, namespace=ns)
        try:
            result = self._client.core_v1.replace_namespaced_secret(
                name=resource_name, namespace=ns, body=body
            )
            self._log.info("replaced_secret", name=resource_name, namespace=ns)
            return SecretSummary.from_k8s_object(result)
        except Exception as e:
            self._handle_api_error(e, "Secret", resource_name, ns)

    def create_or_update_secret(
        self, name: str, value: str, namespace: str | None = None
    ) -> SecretSummary:
        """Create the secret, or replace it if it already exists (best effort)."""
        if self.secret_exists(name, namespace):
            return self.update_secret(name, value, namespace)
        return self.create_secret(name, value, namespace)

    def delete_secret(self, name: str, namespace: str | None = None) -> None:
        """Delete a secret."""
        ns = self._resolve_namespace(namespace)
        self._log.info("deleting_secret", name=name, namespace=ns)
        try:
            self._client.core_v1.delete_namespaced_secret(name=name, namespace=ns)
            self._log.info("deleted_secret", name=name, namespace=ns)
        except Exception as e:
            self._handle_api_error(e, "Secret", name, ns)

    @staticmethod
    def _secret_body(name: str, value: str, namespace: str) -> Any:
        from kubernetes.client import V1ObjectMeta, V1Secret

        return V1Secret(
            metadata=V1ObjectMeta(name=to_kebab_case(name), namespace=namespace),
            type="Opaque",
            data={name: _encode(value)},
        )
