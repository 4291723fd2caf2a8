"""Service account operations for the session namespace.

Deletes for the `serviceAccounts` kind of `kubedev delete` come through here.
"""

from __future__ import annotations

from typing import Any

from kubedev.integrations.kubernetes.models.rbac import ServiceAccountSummary
from kubedev.services.kubernetes.base import K8sBaseManager


class RBACManager(K8sBaseManager):
    """Lists, reads, creates and deletes ServiceAccounts.

    Calls without a namespace use the session default namespace.
    """

    _entity_name = "rbac"

    def list_service_accounts(
        self,
        namespace: str | None = None,
        *,
        all_namespaces: bool = False,
        label_selector: str | None = None,
    ) -> list[ServiceAccountSummary]:
        """List service accounts, retrying transient connection failures.

        Args:
            namespace: Namespace to list; the session default when omitted.
            all_namespaces: Ignore ``namespace`` and list cluster wide.
            label_selector: Only accounts matching this selector.

        Returns:
            Summaries in API server order.
        """
        ns = self._resolve_namespace(namespace)
        self._log.debug("listing_service_accounts", namespace=ns, all_namespaces=all_namespaces)
        kwargs: dict[str, Any] = {}
        if label_selector:
            kwargs["label_selector"] = label_selector

        if all_namespaces:
            result = self._read_with_retry(
                self._client.core_v1.list_service_account_for_all_namespaces,
                "ServiceAccount",
                **kwargs,
            )
        else:
            result = self._read_with_retry(
                self._client.core_v1.list_namespaced_service_account,
                "ServiceAccount",
                ns,
                namespace=ns,
                **kwargs,
            )

        items = [ServiceAccountSummary.from_k8s_object(sa) for sa in result.items]
        self._log.debug("listed_service_accounts", count=len(items))
        return items

    def get_service_account(self, name: str, namespace: str | None = None) -> ServiceAccountSummary:
        """Read one service account; a missing account raises ``KubernetesNotFoundError``."""
        ns = self._resolve_namespace(namespace)
        self._log.debug("getting_service_account", name=name, namespace=ns)
        try:
            result = self._client.core_v1.read_namespaced_service_account(name=name, namespace=ns)
            return ServiceAccountSummary.from_k8s_object(result)
        except Exception as e:
            self._handle_api_error(e, "ServiceAccount", name, ns)

    def create_service_account(
        self,
        name: str,
        namespace: str | None = None,
        *,
        labels: dict[str, str] | None = None,
    ) -> ServiceAccountSummary:
        """Create a service account.

        The call is not retried; an existing account surfaces as
        ``KubernetesConflictError``.

        Returns:
            The account as stored by the API server.
        """
        from kubernetes.client import V1ObjectMeta, V1ServiceAccount

        ns = self._resolve_namespace(namespace)
        body = V1ServiceAccount(metadata=V1ObjectMeta(name=name, namespace=ns, labels=labels))

        self._log.info("creating_service_account", name=name, namespace=ns)
        try:
            result = self._client.core_v1.create_namespaced_service_account(namespace=ns, body=body)
            self._log.info("created_service_account", name=name, namespace=ns)
            return ServiceAccountSummary.from_k8s_object(result)
        except Exception as e:
            self._handle_api_error(e, "ServiceAccount", name, ns)

    def delete_service_account(self, name: str, namespace: str | None = None) -> None:
        """Delete a service account by name."""
        ns = self._resolve_namespace(namespace)
        self._log.info("deleting_service_account", name=name, namespace=ns)
        try:
            self._client.core_v1.delete_namespaced_service_account(name=name, namespace=ns)
            self._log.info("deleted_service_account", name=name, namespace=ns)
        except Exception as e:
            self._handle_api_error(e, "ServiceAccount", name, ns)
