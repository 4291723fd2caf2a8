"""Common plumbing for the kubedev resource managers."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, NoReturn

import structlog

if TYPE_CHECKING:
    from kubedev.integrations.kubernetes.client import KubernetesClient

logger = structlog.get_logger()


class K8sBaseManager:
    """Shared state and helpers of every manager.

    Managers never talk to the API server except through ``self._client``,
    and every API failure leaves them as a ``KubernetesError`` subclass.
    Subclasses set ``_entity_name``, which is bound into each log event.
    """

    _entity_name: str = ""

    def __init__(self, client: KubernetesClient) -> None:
        self._client = client
        self._log = logger.bind(entity=self._entity_name)

    def _resolve_namespace(self, namespace: str | None) -> str:
        """Return ``namespace``, or the default namespace of the active cluster."""
        return namespace or self._client.default_namespace

    def _handle_api_error(
        self,
        e: Exception,
        resource_type: str | None = None,
        resource_name: str | None = None,
        namespace: str | None = None,
    ) -> NoReturn:
        """Raise the ``KubernetesError`` that ``e`` maps to.

        The resource details end up in the error message, e.g.
        ``Pod 'api-0' not found in namespace 'dev'``.
        """
        raise self._client.translate_api_exception(
            e,
            resource_type=resource_type,
            resource_name=resource_name,
            namespace=namespace,
        )

    def _read_with_retry(
        self,
        api_call: Callable[..., Any],
        resource_type: str,
        error_namespace: str | None = None,
        /,
        **kwargs: Any,
    ) -> Any:
        """Run an idempotent read, retrying transient connection failures.

        Errors are translated before the retry policy sees them, so only
        ``KubernetesConnectionError`` is retried.
        """

        @self._client.make_retry_decorator()
        def _call() -> Any:
            try:
                return api_call(**kwargs)
            except Exception as e:
                self._handle_api_error(e, resource_type, None, error_namespace)

        return _call()
