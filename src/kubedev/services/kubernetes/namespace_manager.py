"""Namespaces and the events recorded in them.

Namespaces are cluster scoped, so none of the namespace operations consult
the session default namespace. Events do.
"""

from __future__ import annotations

from typing import Any

from kubedev.integrations.kubernetes.client import EVENTS_V1
from kubedev.integrations.kubernetes.models.cluster import EventSummary, NamespaceSummary
from kubedev.services.kubernetes.base import K8sBaseManager


class NamespaceManager(K8sBaseManager):
    """Manager for Namespaces and the Events recorded in them.

    Events are read through whichever events API the client negotiated for
    its current context.
    """

    _entity_name = "namespace"

    # =========================================================================
    # Namespace Operations
    # =========================================================================

    def list_namespaces(self, *, label_selector: str | None = None) -> list[NamespaceSummary]:
        """List every namespace visible to the current context.

        Args:
            label_selector: Only namespaces matching this selector.
        """
        self._log.debug("listing_namespaces")
        kwargs: dict[str, Any] = {}
        if label_selector:
            kwargs["label_selector"] = label_selector

        result = self._read_with_retry(self._client.core_v1.list_namespace, "Namespace", **kwargs)
        items = [NamespaceSummary.from_k8s_object(ns) for ns in result.items]
        self._log.debug("listed_namespaces", count=len(items))
        return items

    def get_namespace(self, name: str) -> NamespaceSummary:
        """Read one namespace and its phase."""
        self._log.debug("getting_namespace", name=name)
        try:
            result = self._client.core_v1.read_namespace(name=name)
            return NamespaceSummary.from_k8s_object(result)
        except Exception as e:
            self._handle_api_error(e, "Namespace", name, None)

    def create_namespace(
        self,
        name: str,
        *,
        labels: dict[str, str] | None = None,
    ) -> NamespaceSummary:
        """Create a namespace; an existing one raises ``KubernetesConflictError``."""
        from kubernetes.client import V1Namespace, V1ObjectMeta

        body = V1Namespace(metadata=V1ObjectMeta(name=name, labels=labels))

        self._log.info("creating_namespace", name=name)
        try:
            result = self._client.core_v1.create_namespace(body=body)
            self._log.info("created_namespace", name=name)
            return NamespaceSummary.from_k8s_object(result)
        except Exception as e:
            self._handle_api_error(e, "Namespace", name, None)

    def delete_namespace(self, name: str) -> None:
        """Delete a namespace and everything in it."""
        self._log.info("deleting_namespace", name=name)
        try:
            self._client.core_v1.delete_namespace(name=name)
            self._log.info("deleted_namespace", name=name)
        except Exception as e:
            self._handle_api_error(e, "Namespace", name, None)

    # =========================================================================
    # Event Operations
    # =========================================================================

    def list_events(
        self,
        namespace: str | None = None,
        *,
        all_namespaces: bool = False,
        involved_object: str | None = None,
    ) -> list[EventSummary]:
        """List events from the events API the client picked for this context.

        Args:
            namespace: Namespace to read; the session default when omitted.
            all_namespaces: Ignore ``namespace`` and read cluster wide.
            involved_object: Only events about the object with this name. The
                field selector is ``regarding.name`` on events.k8s.io/v1 and
                ``involvedObject.name`` on core/v1.

        Returns:
            Event summaries in API server order.
        """
        ns = self._resolve_namespace(namespace)
        events_api = self._client.events_api
        variant = self._client.events_variant
        self._log.debug("listing_events", namespace=ns, variant=variant)

        kwargs: dict[str, Any] = {}
        if involved_object:
            field = "regarding.name" if variant == EVENTS_V1 else "involvedObject.name"
            kwargs["field_selector"] = f"{field}={involved_object}"

        if all_namespaces:
            result = self._read_with_retry(
                events_api.list_event_for_all_namespaces, "Event", **kwargs
            )
        else:
            result = self._read_with_retry(
                events_api.list_namespaced_event, "Event", ns, namespace=ns, **kwargs
            )

        items = [EventSummary.from_k8s_object(evt) for evt in result.items]
        self._log.debug("listed_events", count=len(items))
        return items
