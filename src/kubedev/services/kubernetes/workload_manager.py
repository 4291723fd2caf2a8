"""Pods and the controllers that own them.

Pod reads feed the readiness poller and the log and exec streams. Deployments
also support create, patch and scale for quick experiments on a dev cluster.
"""

from __future__ import annotations

from typing import Any

from kubedev.integrations.kubernetes.models.workloads import (
    DaemonSetSummary,
    DeploymentSummary,
    PodStatusSnapshot,
    PodSummary,
    ScaleSummary,
    StatefulSetSummary,
)
from kubedev.services.kubernetes.base import K8sBaseManager


def _selector_kwargs(
    label_selector: str | None = None, field_selector: str | None = None
) -> dict[str, Any]:
    kwargs: dict[str, Any] = {}
    if label_selector:
        kwargs["label_selector"] = label_selector
    if field_selector:
        kwargs["field_selector"] = field_selector
    return kwargs


class WorkloadManager(K8sBaseManager):
    """Pod, Deployment, StatefulSet and DaemonSet operations."""

    _entity_name = "workload"

    # =========================================================================
    # Pod Operations
    # =========================================================================

    def list_pods(
        self,
        namespace: str | None = None,
        *,
        all_namespaces: bool = False,
        label_selector: str | None = None,
        field_selector: str | None = None,
    ) -> list[PodSummary]:
        """List pods, retrying the read while the API server is unreachable.

        Args:
            namespace: Namespace to list; the session default when omitted.
            all_namespaces: Ignore ``namespace`` and list cluster wide.
            label_selector: Selector such as ``app=api``.
            field_selector: Selector such as ``status.phase=Running``.

        Returns:
            Pod summaries with their container names and restart totals.
        """
        ns = self._resolve_namespace(namespace)
        self._log.debug("listing_pods", namespace=ns, all_namespaces=all_namespaces)
        kwargs = _selector_kwargs(label_selector, field_selector)

        if all_namespaces:
            result = self._read_with_retry(
                self._client.core_v1.list_pod_for_all_namespaces, "Pod", **kwargs
            )
        else:
            result = self._read_with_retry(
                self._client.core_v1.list_namespaced_pod, "Pod", ns, namespace=ns, **kwargs
            )

        pods = [PodSummary.from_k8s_object(pod) for pod in result.items]
        self._log.debug("listed_pods", count=len(pods))
        return pods

    def get_pod(self, name: str, namespace: str | None = None) -> PodSummary:
        """Read one pod.

        The summary keeps container names in spec order, which is the order
        log streams and exec sessions pick containers in.

        Raises:
            KubernetesNotFoundError: If the pod does not exist.
        """
        ns = self._resolve_namespace(namespace)
        self._log.debug("getting_pod", name=name, namespace=ns)
        try:
            result = self._client.core_v1.read_namespaced_pod(name=name, namespace=ns)
            return PodSummary.from_k8s_object(result)
        except Exception as e:
            self._handle_api_error(e, "Pod", name, ns)

    def get_pod_status(self, name: str, namespace: str | None = None) -> PodStatusSnapshot:
        """Read the pod status subresource, as polled by ``wait_for_pod_ready``.

        Returns:
            Phase, last container state and whether the pod is terminating.
        """
        ns = self._resolve_namespace(namespace)
        self._log.debug("getting_pod_status", name=name, namespace=ns)
        try:
            result = self._client.core_v1.read_namespaced_pod_status(name=name, namespace=ns)
            return PodStatusSnapshot.from_k8s_object(result)
        except Exception as e:
            self._handle_api_error(e, "Pod", name, ns)

    def delete_pod(self, name: str, namespace: str | None = None) -> None:
        """Delete a pod. Its controller, if any, will start a replacement."""
        ns = self._resolve_namespace(namespace)
        self._log.info("deleting_pod", name=name, namespace=ns)
        try:
            self._client.core_v1.delete_namespaced_pod(name=name, namespace=ns)
            self._log.info("deleted_pod", name=name, namespace=ns)
        except Exception as e:
            self._handle_api_error(e, "Pod", name, ns)

    # =========================================================================
    # Deployment Operations
    # =========================================================================

    def list_deployments(
        self,
        namespace: str | None = None,
        *,
        all_namespaces: bool = False,
        label_selector: str | None = None,
    ) -> list[DeploymentSummary]:
        """List deployments with their desired and ready replica counts."""
        ns = self._resolve_namespace(namespace)
        self._log.debug("listing_deployments", namespace=ns, all_namespaces=all_namespaces)
        kwargs = _selector_kwargs(label_selector)

        if all_namespaces:
            result = self._read_with_retry(
                self._client.apps_v1.list_deployment_for_all_namespaces, "Deployment", **kwargs
            )
        else:
            result = self._read_with_retry(
                self._client.apps_v1.list_namespaced_deployment,
                "Deployment",
                ns,
                namespace=ns,
                **kwargs,
            )

        deployments = [DeploymentSummary.from_k8s_object(d) for d in result.items]
        self._log.debug("listed_deployments", count=len(deployments))
        return deployments

    def get_deployment(self, name: str, namespace: str | None = None) -> DeploymentSummary:
        """Read one deployment."""
        ns = self._resolve_namespace(namespace)
        self._log.debug("getting_deployment", name=name, namespace=ns)
        try:
            result = self._client.apps_v1.read_namespaced_deployment(name=name, namespace=ns)
            return DeploymentSummary.from_k8s_object(result)
        except Exception as e:
            self._handle_api_error(e, "Deployment", name, ns)

    def create_deployment(
        self,
        name: str,
        namespace: str | None = None,
        *,
        image: str,
        replicas: int = 1,
        labels: dict[str, str] | None = None,
        port: int | None = None,
    ) -> DeploymentSummary:
        """Create a single-container deployment.

        Args:
            name: Deployment name, reused as the container name.
            namespace: Namespace to create in; the session default when omitted.
            image: Image for the single container.
            replicas: Initial replica count.
            labels: Labels for the deployment, its selector and pod template.
                Defaults to ``{"app": name}``.
            port: Container port to declare, if any.

        Returns:
            The deployment as stored by the API server.
        """
        from kubernetes.client import (
            V1Container,
            V1ContainerPort,
            V1Deployment,
            V1DeploymentSpec,
            V1LabelSelector,
            V1ObjectMeta,
            V1PodSpec,
            V1PodTemplateSpec,
        )

        ns = self._resolve_namespace(namespace)
        pod_labels = labels or {"app": name}

        container = V1Container(
            name=name,
            image=image,
            ports=[V1ContainerPort(container_port=port)] if port else None,
        )
        body = V1Deployment(
            metadata=V1ObjectMeta(name=name, namespace=ns, labels=pod_labels),
            spec=V1DeploymentSpec(
                replicas=replicas,
                selector=V1LabelSelector(match_labels=pod_labels),
                template=V1PodTemplateSpec(
                    metadata=V1ObjectMeta(labels=pod_labels),
                    spec=V1PodSpec(containers=[container]),
                ),
            ),
        )

        self._log.info(
            "creating_deployment", name=name, namespace=ns, image=image, replicas=replicas
        )
        try:
            result = self._client.apps_v1.create_namespaced_deployment(namespace=ns, body=body)
            self._log.info("created_deployment", name=name, namespace=ns)
            return DeploymentSummary.from_k8s_object(result)
        except Exception as e:
            self._handle_api_error(e, "Deployment", name, ns)

    def update_deployment(
        self,
        name: str,
        namespace: str | None = None,
        *,
        image: str | None = None,
        replicas: int | None = None,
        container: str | None = None,
    ) -> DeploymentSummary:
        """Patch the image or replica count of a deployment.

        Fields left as None are not part of the patch. The image change
        targets ``container``, or the container named after the deployment.
        """
        ns = self._resolve_namespace(namespace)
        self._log.info("updating_deployment", name=name, namespace=ns)

        patch: dict[str, Any] = {"spec": {}}
        if replicas is not None:
            patch["spec"]["replicas"] = replicas
        if image is not None:
            patch["spec"]["template"] = {
                "spec": {"containers": [{"name": container or name, "image": image}]}
            }

        try:
            result = self._client.apps_v1.patch_namespaced_deployment(
                name=name, namespace=ns, body=patch
            )
            self._log.info("updated_deployment", name=name, namespace=ns)
            return DeploymentSummary.from_k8s_object(result)
        except Exception as e:
            self._handle_api_error(e, "Deployment", name, ns)

    def scale_deployment(
        self, name: str, namespace: str | None = None, *, replicas: int
    ) -> ScaleSummary:
        """Set the replica count through the deployment's scale subresource.

        Args:
            name: Deployment name.
            namespace: Namespace of the deployment; the session default when omitted.
            replicas: Replica count to set.

        Returns:
            The scale subresource as accepted by the API server.
        """
        from kubernetes.client import V1ObjectMeta, V1Scale, V1ScaleSpec

        ns = self._resolve_namespace(namespace)
        self._log.info("scaling_deployment", name=name, namespace=ns, replicas=replicas)
        body = V1Scale(
            metadata=V1ObjectMeta(name=name, namespace=ns),
            spec=V1ScaleSpec(replicas=replicas),
        )
        try:
            result = self._client.apps_v1.replace_namespaced_deployment_scale(
                name=name, namespace=ns, body=body
            )
            self._log.info("scaled_deployment", name=name, namespace=ns, replicas=replicas)
            return ScaleSummary.from_k8s_object(result)
        except Exception as e:
            self._handle_api_error(e, "Deployment", name, ns)

    def delete_deployment(self, name: str, namespace: str | None = None) -> None:
        """Delete a deployment and, through garbage collection, its replica sets."""
        ns = self._resolve_namespace(namespace)
        self._log.info("deleting_deployment", name=name, namespace=ns)
        try:
            self._client.apps_v1.delete_namespaced_deployment(name=name, namespace=ns)
            self._log.info("deleted_deployment", name=name, namespace=ns)
        except Exception as e:
            self._handle_api_error(e, "Deployment", name, ns)

    # =========================================================================
    # StatefulSet Operations
    # =========================================================================

    def list_stateful_sets(
        self,
        namespace: str | None = None,
        *,
        all_namespaces: bool = False,
        label_selector: str | None = None,
    ) -> list[StatefulSetSummary]:
        """List stateful sets."""
        ns = self._resolve_namespace(namespace)
        self._log.debug("listing_statefulsets", namespace=ns, all_namespaces=all_namespaces)
        kwargs = _selector_kwargs(label_selector)

        if all_namespaces:
            result = self._read_with_retry(
                self._client.apps_v1.list_stateful_set_for_all_namespaces, "StatefulSet", **kwargs
            )
        else:
            result = self._read_with_retry(
                self._client.apps_v1.list_namespaced_stateful_set,
                "StatefulSet",
                ns,
                namespace=ns,
                **kwargs,
            )

        items = [StatefulSetSummary.from_k8s_object(s) for s in result.items]
        self._log.debug("listed_statefulsets", count=len(items))
        return items

    def get_stateful_set(self, name: str, namespace: str | None = None) -> StatefulSetSummary:
        """Read one stateful set."""
        ns = self._resolve_namespace(namespace)
        self._log.debug("getting_statefulset", name=name, namespace=ns)
        try:
            result = self._client.apps_v1.read_namespaced_stateful_set(name=name, namespace=ns)
            return StatefulSetSummary.from_k8s_object(result)
        except Exception as e:
            self._handle_api_error(e, "StatefulSet", name, ns)

    def delete_stateful_set(self, name: str, namespace: str | None = None) -> None:
        """Delete a stateful set. Its persistent volume claims are kept."""
        ns = self._resolve_namespace(namespace)
        self._log.info("deleting_statefulset", name=name, namespace=ns)
        try:
            self._client.apps_v1.delete_namespaced_stateful_set(name=name, namespace=ns)
            self._log.info("deleted_statefulset", name=name, namespace=ns)
        except Exception as e:
            self._handle_api_error(e, "StatefulSet", name, ns)

    # =========================================================================
    # DaemonSet Operations
    # =========================================================================

    def list_daemon_sets(
        self,
        namespace: str | None = None,
        *,
        all_namespaces: bool = False,
        label_selector: str | None = None,
    ) -> list[DaemonSetSummary]:
        """List daemon sets with their scheduled and ready pod counts."""
        ns = self._resolve_namespace(namespace)
        self._log.debug("listing_daemonsets", namespace=ns, all_namespaces=all_namespaces)
        kwargs = _selector_kwargs(label_selector)

        if all_namespaces:
            result = self._read_with_retry(
                self._client.apps_v1.list_daemon_set_for_all_namespaces, "DaemonSet", **kwargs
            )
        else:
            result = self._read_with_retry(
                self._client.apps_v1.list_namespaced_daemon_set,
                "DaemonSet",
                ns,
                namespace=ns,
                **kwargs,
            )

        items = [DaemonSetSummary.from_k8s_object(d) for d in result.items]
        self._log.debug("listed_daemonsets", count=len(items))
        return items

    def get_daemon_set(self, name: str, namespace: str | None = None) -> DaemonSetSummary:
        """Read one daemon set."""
        ns = self._resolve_namespace(namespace)
        self._log.debug("getting_daemonset", name=name, namespace=ns)
        try:
            result = self._client.apps_v1.read_namespaced_daemon_set(name=name, namespace=ns)
            return DaemonSetSummary.from_k8s_object(result)
        except Exception as e:
            self._handle_api_error(e, "DaemonSet", name, ns)

    def delete_daemon_set(self, name: str, namespace: str | None = None) -> None:
        """Delete a daemon set."""
        ns = self._resolve_namespace(namespace)
        self._log.info("deleting_daemonset", name=name, namespace=ns)
        try:
            self._client.apps_v1.delete_namespaced_daemon_set(name=name, namespace=ns)
            self._log.info("deleted_daemonset", name=name, namespace=ns)
        except Exception as e:
            self._handle_api_error(e, "DaemonSet", name, ns)
