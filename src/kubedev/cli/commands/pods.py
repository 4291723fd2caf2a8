"""CLI commands for pods: listing, status and readiness waits."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Annotated

import typer
from rich.table import Table

from kubedev.cli.commands.base import (
    AllNamespacesOption,
    LabelSelectorOption,
    NamespaceOption,
    OutputOption,
    console,
    handle_k8s_error,
)
from kubedev.cli.output import OutputFormat, render_list, render_resource
from kubedev.integrations.kubernetes.exceptions import KubernetesError

if TYPE_CHECKING:
    from kubedev.integrations.kubernetes.models import PodStatusSnapshot
    from kubedev.services.kubernetes import KubernetesSession

# =============================================================================
# Column Definitions
# =============================================================================

POD_COLUMNS = [
    ("name", "Name"),
    ("namespace", "Namespace"),
    ("ready", "Ready"),
    ("phase_text", "Status"),
    ("restarts", "Restarts"),
    ("node_name", "Node"),
    ("age", "Age"),
]

STATUS_COLUMNS = [
    ("pod_name", "Pod"),
    ("namespace", "Namespace"),
    ("phase_text", "Phase"),
    ("last_state_text", "Container State"),
]

TimeoutOption = Annotated[
    float | None,
    typer.Option(
        "--timeout",
        "-t",
        help="Seconds to wait for each pod (defaults to config timeout)",
    ),
]

IntervalOption = Annotated[
    float | None,
    typer.Option(
        "--interval",
        help="Seconds between status checks (defaults to config poll interval)",
    ),
]


def _status_table(snapshots: list[PodStatusSnapshot], title: str) -> Table:
    table = Table(title=title)
    for _attr, header in STATUS_COLUMNS:
        table.add_column(header, style="cyan" if header == "Pod" else None, overflow="fold")
    for snapshot in snapshots:
        table.add_row(
            snapshot.pod_name,
            snapshot.namespace or "-",
            snapshot.phase_text,
            snapshot.last_state_text,
        )
    return table


def register_pod_commands(
    app: typer.Typer,
    get_session: Callable[[], KubernetesSession],
) -> None:
    """Register the ``pods`` command group."""

    pods_app = typer.Typer(
        name="pods",
        help="List pods, show their status and wait for readiness",
        no_args_is_help=True,
    )
    app.add_typer(pods_app, name="pods")

    @pods_app.command("list")
    def list_pods(
        namespace: NamespaceOption = None,
        all_namespaces: AllNamespacesOption = False,
        selector: LabelSelectorOption = None,
        output: OutputOption = OutputFormat.TABLE,
    ) -> None:
        """List pods.

        Examples:
            kubedev pods list
            kubedev pods list -A
            kubedev pods list -l app=api -o yaml
        """
        try:
            session = get_session()
            pods = session.workloads.list_pods(
                namespace, all_namespaces=all_namespaces, label_selector=selector
            )
            render_list(console, pods, POD_COLUMNS, output, title="Pods")
        except KubernetesError as e:
            handle_k8s_error(e)

    @pods_app.command("status")
    def pod_status(
        name: Annotated[str, typer.Argument(help="Pod name")],
        namespace: NamespaceOption = None,
        output: OutputOption = OutputFormat.TABLE,
    ) -> None:
        """Show a pod's phase and its last container state."""
        try:
            session = get_session()
            snapshot = session.workloads.get_pod_status(name, namespace)
            if output == OutputFormat.TABLE:
                console.print(_status_table([snapshot], title="Pod Status"))
            else:
                render_resource(console, snapshot, output)
        except KubernetesError as e:
            handle_k8s_error(e)

    @pods_app.command("wait")
    def wait_pods(
        names: Annotated[
            list[str], typer.Argument(help="Pod names or name fragments, waited in order")
        ],
        namespace: NamespaceOption = None,
        timeout: TimeoutOption = None,
        interval: IntervalOption = None,
    ) -> None:
        """Wait for pods to be running, one after the other.

        Each name is matched against the namespace's pods by substring, the
        first match in name order is used. Fails as soon as a pod reaches a
        terminal phase.

        Examples:
            kubedev pods wait api worker
            kubedev pods wait api -n staging --timeout 120
        """
        try:
            session = get_session()
            defaults = session.client.defaults
            snapshots = session.readiness.wait_for_pods(
                names,
                namespace,
                timeout=timeout if timeout is not None else session.client.timeout,
                interval=interval if interval is not None else defaults.poll_interval,
            )
            console.print(_status_table(snapshots, title="Ready Pods"))
        except KubernetesError as e:
            handle_k8s_error(e)
