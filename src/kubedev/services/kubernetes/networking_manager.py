"""Service lookups and the API server service proxy."""

from __future__ import annotations

from typing import Any

from kubedev.integrations.kubernetes.models.networking import ServiceSummary
from kubedev.services.kubernetes.base import K8sBaseManager


class NetworkingManager(K8sBaseManager):
    """Reads and deletes Services and reaches them through the API server proxy.

    The proxy lets `kubedev` talk to a ClusterIP service without a port-forward.
    """

    _entity_name = "networking"

    def list_services(
        self,
        namespace: str | None = None,
        *,
        all_namespaces: bool = False,
        label_selector: str | None = None,
    ) -> list[ServiceSummary]:
        """List services in a namespace or across the cluster.

        Reads are retried on connection failures only.
        """
        ns = self._resolve_namespace(namespace)
        self._log.debug("listing_services", namespace=ns, all_namespaces=all_namespaces)
        kwargs: dict[str, Any] = {}
        if label_selector:
            kwargs["label_selector"] = label_selector

        if all_namespaces:
            result = self._read_with_retry(
                self._client.core_v1.list_service_for_all_namespaces, "Service", **kwargs
            )
        else:
            result = self._read_with_retry(
                self._client.core_v1.list_namespaced_service, "Service", ns, namespace=ns, **kwargs
            )

        items = [ServiceSummary.from_k8s_object(s) for s in result.items]
        self._log.debug("listed_services", count=len(items))
        return items

    def get_service(self, name: str, namespace: str | None = None) -> ServiceSummary:
        """Read one service in ``namespace`` or the session default."""
        ns = self._resolve_namespace(namespace)
        self._log.debug("getting_service", name=name, namespace=ns)
        try:
            result = self._client.core_v1.read_namespaced_service(name=name, namespace=ns)
            return ServiceSummary.from_k8s_object(result)
        except Exception as e:
            self._handle_api_error(e, "Service", name, ns)

    def get_service_proxy(
        self, name: str, namespace: str | None = None, *, path: str | None = None
    ) -> str:
        """Send a GET to a service through ``services/{name}/proxy``.

        Args:
            name: Service name; use ``name:port`` to pick a named or numbered port.
            namespace: Namespace of the service; the session default when omitted.
            path: Request path on the service, e.g. ``healthz``.

        Returns:
            The body the service answered with, undecoded.
        """
        ns = self._resolve_namespace(namespace)
        self._log.debug("proxying_service", name=name, namespace=ns, path=path)
        kwargs: dict[str, Any] = {}
        if path:
            kwargs["path"] = path
        try:
            result: str = self._client.core_v1.connect_get_namespaced_service_proxy(
                name=name, namespace=ns, **kwargs
            )
            return result
        except Exception as e:
            self._handle_api_error(e, "Service", name, ns)

    def delete_service(self, name: str, namespace: str | None = None) -> None:
        """Delete a service; its endpoints go with it."""
        ns = self._resolve_namespace(namespace)
        self._log.info("deleting_service", name=name, namespace=ns)
        try:
            self._client.core_v1.delete_namespaced_service(name=name, namespace=ns)
            self._log.info("deleted_service", name=name, namespace=ns)
        except Exception as e:
            self._handle_api_error(e, "Service", name, ns)
