"""CLI commands for kubeconfig contexts."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Annotated

import typer

from kubedev.cli.commands.base import OutputOption, console, handle_k8s_error
from kubedev.cli.output import OutputFormat, render_list, render_resource
from kubedev.integrations.kubernetes.exceptions import KubernetesError

if TYPE_CHECKING:
    from kubedev.services.kubernetes import KubernetesSession

CONTEXT_COLUMNS = [
    ("name", "Name"),
    ("cluster", "Cluster"),
    ("user", "User"),
    ("namespace", "Namespace"),
]


def register_context_commands(
    app: typer.Typer,
    get_session: Callable[[], KubernetesSession],
) -> None:
    """Register the ``contexts`` command group."""

    contexts_app = typer.Typer(
        name="contexts",
        help="Inspect and switch kubeconfig contexts",
        no_args_is_help=True,
    )
    app.add_typer(contexts_app, name="contexts")

    @contexts_app.command("list")
    def list_contexts(output: OutputOption = OutputFormat.TABLE) -> None:
        """List kubeconfig contexts.

        Examples:
            kubedev contexts list
            kubedev contexts list -o json
        """
        try:
            session = get_session()
            contexts = session.list_contexts()
            render_list(console, contexts, CONTEXT_COLUMNS, output, title="Contexts")
            if output == OutputFormat.TABLE:
                current = session.get_current_context().name
                console.print(f"[dim]Current context:[/dim] [cyan]{current}[/cyan]")
        except KubernetesError as e:
            handle_k8s_error(e)

    @contexts_app.command("current")
    def current_context(output: OutputOption = OutputFormat.TABLE) -> None:
        """Show the context the session is connected to."""
        try:
            session = get_session()
            context = session.get_current_context()
            if output == OutputFormat.TABLE:
                console.print(context.name)
            else:
                render_resource(console, context, output)
        except KubernetesError as e:
            handle_k8s_error(e)

    @contexts_app.command("use")
    def use_context(
        name: Annotated[str, typer.Argument(help="Context or configured cluster name")],
    ) -> None:
        """Switch to a context and check that its API server answers.

        The switch applies to this invocation; pass ``--context`` to other
        commands to target a context.

        Examples:
            kubedev contexts use staging
        """
        try:
            session = get_session()
            session.set_context(name)
            context = session.get_current_context()
            console.print(
                f"[green]Switched to context[/green] '{context.name}'"
                f" (events API: {session.client.events_variant})"
            )
        except KubernetesError as e:
            handle_k8s_error(e)
