"""Kubernetes API client wrapper.

Holds the current kubeconfig context and every API handle bound to it.
Switching contexts builds a fresh ``ApiClient`` and negotiates the events
API variant before anything is committed, so a failed switch leaves the
previous context untouched.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from kubedev.integrations.kubernetes.exceptions import (
    KubernetesAuthError,
    KubernetesConflictError,
    KubernetesConnectionError,
    KubernetesError,
    KubernetesNotFoundError,
    KubernetesValidationError,
)
from kubedev.integrations.kubernetes.models.cluster import ClusterContext

if TYPE_CHECKING:
    from kubernetes.client import (
        ApiClient,
        AppsV1Api,
        BatchV1Api,
        CoreV1Api,
    )

    from kubedev.integrations.kubernetes.config import KubernetesPluginConfig

logger = structlog.get_logger()

IN_CLUSTER_CONTEXT = "in-cluster"
EVENTS_V1 = "events.k8s.io/v1"
EVENTS_CORE_V1 = "v1"


class KubernetesClient:
    """Context-aware Kubernetes API client.

    Wraps the official kubernetes Python client with:
    - A per-client ``ApiClient`` bound to one kubeconfig context
    - Lazy API group initialization
    - Events API variant negotiation, once per context
    - Automatic retry with tenacity for transient errors
    - Consistent error translation to custom exceptions
    - Context manager support

    Example:
        ```python
        from kubedev.integrations.kubernetes import KubernetesClient
        from kubedev.integrations.kubernetes.config import KubernetesPluginConfig

        config = KubernetesPluginConfig.from_env()
        with KubernetesClient(config) as client:
            pods = client.core_v1.list_namespaced_pod(client.default_namespace)
        ```
    """

    def __init__(self, plugin_config: KubernetesPluginConfig) -> None:
        """Initialize the client from kubedev config.

        Loads the active context from kubeconfig. If no kubeconfig can be
        loaded and no context was requested explicitly, falls back to the
        in-cluster service account configuration.

        Args:
            plugin_config: Complete kubedev configuration.

        Raises:
            KubernetesConnectionError: If no configuration can be loaded.
        """
        self._config = plugin_config
        self._retries = plugin_config.defaults.retry_attempts
        self._namespace_override: str | None = None
        self._kubeconfig = plugin_config.get_active_kubeconfig()
        self._active_cluster = plugin_config.active_cluster

        # Lazy-loaded API group instances
        self._core_v1: CoreV1Api | None = None
        self._apps_v1: AppsV1Api | None = None
        self._batch_v1: BatchV1Api | None = None
        self._events_api: Any | None = None
        self._events_variant: str | None = None

        self._api_client, self._context = self._load_config(
            plugin_config.get_active_context(), self._kubeconfig
        )

        logger.info(
            "Kubernetes client initialized",
            context=self._context.name,
            default_namespace=self.default_namespace,
        )

    def _load_config(
        self, context: str | None, kubeconfig: str | None
    ) -> tuple[ApiClient, ClusterContext]:
        """Build an ApiClient from kubeconfig, or in-cluster as a fallback."""
        from kubernetes.config import ConfigException

        try:
            return self._build_api_client(context, kubeconfig)
        except ConfigException as e:
            if context:
                raise KubernetesConnectionError(
                    message=f"Cannot load Kubernetes context '{context}'",
                    original_error=e,
                ) from e
            try:
                return self._build_incluster_client()
            except ConfigException as inner:
                raise KubernetesConnectionError(
                    message="Cannot load Kubernetes configuration. "
                    "Ensure kubeconfig exists or running inside a cluster.",
                    original_error=inner,
                ) from inner

    @staticmethod
    def _build_api_client(
        context: str | None, kubeconfig: str | None
    ) -> tuple[ApiClient, ClusterContext]:
        from kubernetes import config

        contexts, active = config.list_kube_config_contexts(config_file=kubeconfig)
        wanted = context or (active or {}).get("name")
        entry = next((c for c in contexts if c.get("name") == wanted), None)
        if entry is None:
            raise config.ConfigException(f"Context '{wanted}' not found in kubeconfig")

        api_client = config.new_client_from_config(config_file=kubeconfig, context=wanted)
        logger.debug("loaded_kubeconfig", context=wanted, kubeconfig=kubeconfig)
        return api_client, ClusterContext.from_kubeconfig(entry)

    @staticmethod
    def _build_incluster_client() -> tuple[ApiClient, ClusterContext]:
        from kubernetes import config
        from kubernetes.client import ApiClient, Configuration

        configuration = Configuration()
        config.load_incluster_config(client_configuration=configuration)
        logger.debug("loaded_incluster_config")
        return ApiClient(configuration=configuration), ClusterContext(name=IN_CLUSTER_CONTEXT)

    @staticmethod
    def _negotiate_events_api(api_client: ApiClient) -> tuple[Any, str]:
        """Query the events API group once and pick the handle to use.

        The Python client no longer ships the beta events API, so servers that
        do not prefer ``events.k8s.io/v1`` are served through core/v1 events.
        """
        from kubernetes.client import CoreV1Api, EventsApi, EventsV1Api

        group = EventsApi(api_client).get_api_group()
        preferred = getattr(getattr(group, "preferred_version", None), "version", None)
        if preferred == "v1":
            return EventsV1Api(api_client), EVENTS_V1
        return CoreV1Api(api_client), EVENTS_CORE_V1

    def _invalidate_api_cache(self) -> None:
        """Clear cached API group instances."""
        self._core_v1 = None
        self._apps_v1 = None
        self._batch_v1 = None
        self._events_api = None
        self._events_variant = None

    # =========================================================================
    # Lazy API Group Accessors
    # =========================================================================

    @property
    def api_client(self) -> ApiClient:
        """The ApiClient bound to the current context."""
        return self._api_client

    @property
    def core_v1(self) -> CoreV1Api:
        """Get CoreV1Api instance (pods, services, namespaces, secrets, configmaps, etc.)."""
        if self._core_v1 is None:
            from kubernetes.client import CoreV1Api

            self._core_v1 = CoreV1Api(self._api_client)
        return self._core_v1

    @property
    def apps_v1(self) -> AppsV1Api:
        """Get AppsV1Api instance (deployments, statefulsets, daemonsets)."""
        if self._apps_v1 is None:
            from kubernetes.client import AppsV1Api

            self._apps_v1 = AppsV1Api(self._api_client)
        return self._apps_v1

    @property
    def batch_v1(self) -> BatchV1Api:
        """Get BatchV1Api instance (jobs, cronjobs)."""
        if self._batch_v1 is None:
            from kubernetes.client import BatchV1Api

            self._batch_v1 = BatchV1Api(self._api_client)
        return self._batch_v1

    @property
    def events_api(self) -> Any:
        """Get the negotiated events API handle.

        Either an ``EventsV1Api`` or a ``CoreV1Api`` serving legacy events;
        see ``events_variant``.
        """
        if self._events_api is None:
            try:
                self._events_api, self._events_variant = self._negotiate_events_api(
                    self._api_client
                )
            except Exception as e:
                raise self.translate_api_exception(e, resource_type="APIGroup") from e
            logger.debug("negotiated_events_api", variant=self._events_variant)
        return self._events_api

    @property
    def events_variant(self) -> str:
        """``events.k8s.io/v1`` or ``v1`` (legacy core events)."""
        if self._events_variant is None:
            _ = self.events_api
        return self._events_variant or EVENTS_CORE_V1

    # =========================================================================
    # Context Management
    # =========================================================================

    def switch_context(self, context_name: str) -> None:
        """Switch to a different Kubernetes context.

        Builds the new ApiClient and negotiates the events API before
        committing. On failure the current context and its handles are kept.

        Args:
            context_name: The kubeconfig context name or a named cluster
                from the kubedev config.

        Raises:
            KubernetesConnectionError: If the context cannot be loaded or
                the API server cannot be reached.
        """
        from kubernetes.config import ConfigException

        context, kubeconfig = self._config.resolve_cluster(context_name)

        try:
            api_client, cluster_context = self._build_api_client(context, kubeconfig)
        except (ConfigException, OSError) as e:
            raise KubernetesConnectionError(
                message=f"Failed to switch to context '{context_name}'",
                original_error=e,
            ) from e

        try:
            events_api, events_variant = self._negotiate_events_api(api_client)
        except Exception as e:
            api_client.close()
            raise KubernetesConnectionError(
                message=f"Failed to reach the API server of context '{context_name}'",
                original_error=e,
            ) from e

        previous = self._api_client
        self._invalidate_api_cache()
        self._api_client = api_client
        self._context = cluster_context
        self._kubeconfig = kubeconfig
        self._active_cluster = context_name
        self._events_api = events_api
        self._events_variant = events_variant
        previous.close()

        logger.info("switched_context", context=cluster_context.name, events=events_variant)

    set_context = switch_context

    def get_current_context(self) -> ClusterContext:
        """Get the active context."""
        return self._context

    def list_contexts(self) -> list[ClusterContext]:
        """List all available kubeconfig contexts in kubeconfig order.

        Raises:
            KubernetesConnectionError: If the kubeconfig cannot be read.
        """
        from kubernetes import config
        from kubernetes.config import ConfigException

        try:
            contexts, _ = config.list_kube_config_contexts(config_file=self._kubeconfig)
        except (ConfigException, OSError) as e:
            raise KubernetesConnectionError(
                message="Cannot read kubeconfig contexts",
                original_error=e,
            ) from e

        return [ClusterContext.from_kubeconfig(ctx) for ctx in contexts]

    # =========================================================================
    # Namespace
    # =========================================================================

    def set_namespace(self, namespace: str | None) -> None:
        """Override the default namespace for this client (None clears it)."""
        self._namespace_override = namespace
        logger.debug("set_namespace", namespace=namespace)

    @property
    def default_namespace(self) -> str:
        """Namespace used when an operation is not given one."""
        return self._namespace_override or self._config.get_cluster_namespace(
            self._active_cluster, self._context.namespace
        )

    @property
    def timeout(self) -> int:
        """Get the configured timeout."""
        return self._config.get_cluster_timeout(self._active_cluster)

    @property
    def defaults(self) -> Any:
        """Operation defaults from config (poll interval, log window, shell)."""
        return self._config.defaults

    # =========================================================================
    # Error Translation
    # =========================================================================

    @staticmethod
    def translate_api_exception(
        e: Exception,
        resource_type: str | None = None,
        resource_name: str | None = None,
        namespace: str | None = None,
    ) -> KubernetesError:
        """Translate a kubernetes ApiException to a custom exception.

        Transport failures raised by urllib3 become KubernetesConnectionError.

        Args:
            e: The original exception.
            resource_type: Type of resource being operated on.
            resource_name: Name of the resource.
            namespace: Namespace of the resource.

        Returns:
            An appropriate KubernetesError subclass.
        """
        from kubernetes.client import ApiException
        from urllib3.exceptions import HTTPError

        if isinstance(e, KubernetesError):
            return e

        if isinstance(e, HTTPError):
            return KubernetesConnectionError(
                message=f"Cannot reach Kubernetes API server: {e}",
                original_error=e,
            )

        if not isinstance(e, ApiException):
            return KubernetesError(
                message=str(e),
                resource_type=resource_type,
                resource_name=resource_name,
                namespace=namespace,
            )

        status = e.status

        if status in (401, 403):
            return KubernetesAuthError(
                message=e.reason or "Authentication/authorization failed",
                status_code=status,
                reason=e.reason,
            )

        if status == 404:
            return KubernetesNotFoundError(
                resource_type=resource_type,
                resource_name=resource_name,
                namespace=namespace,
            )

        if status == 409:
            return KubernetesConflictError(
                resource_type=resource_type,
                resource_name=resource_name,
                namespace=namespace,
            )

        if status in (400, 422):
            return KubernetesValidationError(
                message=e.reason or "Validation failed",
                status_code=status,
            )

        return KubernetesError(
            message=e.reason or f"Kubernetes API error: {status}",
            status_code=status,
            resource_type=resource_type,
            resource_name=resource_name,
            namespace=namespace,
        )

    # =========================================================================
    # Retry Decorator
    # =========================================================================

    def make_retry_decorator(self) -> Any:
        """Create a retry decorator for transient connection errors.

        Returns:
            A tenacity retry decorator configured with exponential backoff.
        """
        return retry(
            retry=retry_if_exception_type(KubernetesConnectionError),
            stop=stop_after_attempt(self._retries),
            wait=wait_exponential(multiplier=1, min=1, max=10),
            reraise=True,
        )

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def close(self) -> None:
        """Close the client and release resources."""
        self._invalidate_api_cache()
        self._api_client.close()
        logger.debug("Kubernetes client closed")

    def __enter__(self) -> KubernetesClient:
        """Context manager entry."""
        return self

    def __exit__(self, *args: Any) -> None:
        """Context manager exit."""
        self.close()
