"""CLI command for deleting resources of any supported kind."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Annotated

import typer

from kubedev.cli.commands.base import (
    ForceOption,
    NamespaceOption,
    confirm_delete,
    console,
    handle_k8s_error,
)
from kubedev.integrations.kubernetes.exceptions import KubernetesError
from kubedev.integrations.kubernetes.models.resources import ResourceKind

if TYPE_CHECKING:
    from kubedev.services.kubernetes import KubernetesSession

KIND_HELP = "Resource kind: " + ", ".join(kind.value for kind in ResourceKind)


def register_resource_commands(
    app: typer.Typer,
    get_session: Callable[[], KubernetesSession],
) -> None:
    """Register the ``delete`` command."""

    @app.command("delete")
    def delete_resource(
        kind: Annotated[str, typer.Argument(help=KIND_HELP)],
        name: Annotated[str, typer.Argument(help="Resource name")],
        namespace: NamespaceOption = None,
        force: ForceOption = False,
    ) -> None:
        """Delete a resource by kind and name.

        Examples:
            kubedev delete pods api-0
            kubedev delete configMaps app-settings -n staging --force
        """
        try:
            session = get_session()
            resource_kind = session.resources.parse_kind(kind)
            ns = namespace or session.namespace
            if resource_kind == ResourceKind.NAMESPACES:
                ns = None
            if not force and not confirm_delete(resource_kind.value, name, ns):
                console.print("[yellow]Cancelled[/yellow]")
                raise typer.Exit(0)

            session.resources.delete_resource(resource_kind, name, namespace)
            console.print(f"[green]{resource_kind.value} '{name}' deleted[/green]")
        except KubernetesError as e:
            handle_k8s_error(e)
