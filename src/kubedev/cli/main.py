"""Main CLI entry point using Typer."""

from __future__ import annotations

import typer
from rich.console import Console

from kubedev import __version__
from kubedev.cli.commands.contexts import register_context_commands
from kubedev.cli.commands.pods import register_pod_commands
from kubedev.cli.commands.resources import register_resource_commands
from kubedev.cli.commands.streaming import register_streaming_commands
from kubedev.logging.config import configure_logging
from kubedev.services.kubernetes import KubernetesSession

app = typer.Typer(
    name="kubedev",
    help="Kubernetes helpers for day-to-day development.",
    add_completion=True,
    no_args_is_help=True,
)

console = Console()

_state: dict[str, str | None] = {"context": None, "namespace": None}
_sessions: list[KubernetesSession] = []


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"kubedev version {__version__}")
        raise typer.Exit()


def get_session() -> KubernetesSession:
    """Build the session on first use with the global context and namespace."""
    if not _sessions:
        _sessions.append(
            KubernetesSession.from_config(
                context=_state["context"], namespace=_state["namespace"]
            )
        )
    return _sessions[0]


def close_session() -> None:
    while _sessions:
        _sessions.pop().close()


@app.callback()
def main(
    ctx: typer.Context,
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    context: str | None = typer.Option(
        None,
        "--context",
        envvar="KUBEDEV_CONTEXT",
        help="Kubeconfig context or configured cluster to use.",
    ),
    namespace: str | None = typer.Option(
        None,
        "--namespace",
        envvar="KUBEDEV_NAMESPACE",
        help="Default namespace for commands.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output.",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug mode.",
    ),
) -> None:
    """kubedev - contexts, pods, logs and shells without the boilerplate."""
    configure_logging(verbose=verbose, debug=debug)
    close_session()
    _state["context"] = context
    _state["namespace"] = namespace
    ctx.call_on_close(close_session)


register_context_commands(app, get_session)
register_pod_commands(app, get_session)
register_streaming_commands(app, get_session)
register_resource_commands(app, get_session)


if __name__ == "__main__":
    app()
