"""Service summaries for listing and the service proxy."""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import Field

from kubedev.integrations.kubernetes.models.base import K8sEntityBase, _safe_get


class ServicePort(K8sEntityBase):
    """One port of a Service. Target ports keep named ports as strings."""

    _entity_name: ClassVar[str] = "serviceport"

    port: int = Field(description="Port exposed on the cluster IP")
    target_port: str | None = Field(default=None, description="Container port number or name")
    protocol: str = Field(default="TCP", description="TCP, UDP or SCTP")
    node_port: int | None = Field(
        default=None, description="NodePort, for NodePort and LoadBalancer services"
    )

    @classmethod
    def from_k8s_object(cls, obj: Any) -> ServicePort:
        """Build from a ``V1ServicePort``; int target ports are stringified."""
        target_port = getattr(obj, "target_port", None)
        return cls(
            name=getattr(obj, "name", "") or "",
            port=getattr(obj, "port", 0),
            target_port=str(target_port) if target_port is not None else None,
            protocol=getattr(obj, "protocol", "TCP") or "TCP",
            node_port=getattr(obj, "node_port", None),
        )


class ServiceSummary(K8sEntityBase):
    """A Service with its first reachable external address.

    ``external_ip`` prefers spec.externalIPs, then the first load balancer
    ingress IP or hostname.
    """

    _entity_name: ClassVar[str] = "service"

    type: str = Field(
        default="ClusterIP", description="ClusterIP, NodePort, LoadBalancer or ExternalName"
    )
    cluster_ip: str | None = Field(
        default=None, description="spec.clusterIP, None for headless services"
    )
    external_ip: str | None = Field(
        default=None, description="See the class docstring for the lookup order"
    )
    ports: list[ServicePort] = Field(default_factory=list, description="Ports in spec order")
    selector: dict[str, str] | None = Field(
        default=None, description="Labels selecting backing pods"
    )

    @classmethod
    def from_k8s_object(cls, obj: Any) -> ServiceSummary:
        """Build from a ``V1Service``."""
        ports = _safe_get(obj, "spec", "ports") or []

        external_ips = _safe_get(obj, "spec", "external_i_ps") or []
        lb_ingress = _safe_get(obj, "status", "load_balancer", "ingress") or []
        external_ip = None
        if external_ips:
            external_ip = external_ips[0]
        elif lb_ingress:
            external_ip = getattr(lb_ingress[0], "ip", None) or getattr(
                lb_ingress[0], "hostname", None
            )

        selector = _safe_get(obj, "spec", "selector")

        return cls(
            **cls._metadata_fields(obj),
            type=_safe_get(obj, "spec", "type", default="ClusterIP"),
            cluster_ip=_safe_get(obj, "spec", "cluster_ip"),
            external_ip=external_ip,
            ports=[ServicePort.from_k8s_object(p) for p in ports],
            selector=dict(selector) if selector else None,
        )
