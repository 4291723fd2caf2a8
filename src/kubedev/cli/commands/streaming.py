"""CLI commands that stream from pods: logs and exec."""

from __future__ import annotations

import sys
import threading
from collections.abc import Callable
from typing import TYPE_CHECKING, Annotated

import typer
from rich.text import Text

from kubedev.cli.commands.base import (
    ContainerOption,
    NamespaceOption,
    console,
    err_console,
    handle_k8s_error,
)
from kubedev.integrations.kubernetes.exceptions import KubernetesError

if TYPE_CHECKING:
    from kubedev.services.kubernetes import KubernetesSession, LogStreamHandle

JOIN_INTERVAL = 0.5


def _wait_for_streams(handles: list[LogStreamHandle], cancel: threading.Event) -> None:
    """Block until every stream ends; Ctrl-C stops them all."""
    try:
        while any(handle.is_alive() for handle in handles):
            for handle in handles:
                handle.join(JOIN_INTERVAL)
    except KeyboardInterrupt:
        cancel.set()
        for handle in handles:
            handle.stop()
        for handle in handles:
            handle.join(JOIN_INTERVAL)


def register_streaming_commands(
    app: typer.Typer,
    get_session: Callable[[], KubernetesSession],
) -> None:
    """Register the ``logs`` and ``exec`` commands."""

    @app.command("logs")
    def logs(
        name: Annotated[str, typer.Argument(help="Pod name")],
        namespace: NamespaceOption = None,
        container: ContainerOption = None,
        follow: Annotated[
            bool,
            typer.Option("--follow", "-f", help="Follow every container's log"),
        ] = False,
        since: Annotated[
            int | None,
            typer.Option("--since", help="With --follow, start this many seconds back"),
        ] = None,
        timestamps: Annotated[
            bool,
            typer.Option("--timestamps/--no-timestamps", help="Print line timestamps"),
        ] = True,
    ) -> None:
        """Print a pod's logs, or follow all of its containers.

        Examples:
            kubedev logs api-0
            kubedev logs api-0 -c sidecar
            kubedev logs api-0 --follow --since 300
        """
        try:
            session = get_session()
            if not follow:
                for entry in session.streaming.get_pod_logs(name, namespace, container=container):
                    line = Text(entry.message)
                    if timestamps and entry.timestamp:
                        line = Text.assemble((entry.timestamp, "dim"), " ", entry.message)
                    console.print(line, highlight=False)
                return

            defaults = session.client.defaults
            since_seconds = since if since is not None else defaults.log_since_seconds
            cancel = threading.Event()
            handles = session.streaming.stream_log(
                name, namespace, sys.stdout, since_seconds=since_seconds, cancel=cancel
            )
        except KubernetesError as e:
            handle_k8s_error(e)
            return

        _wait_for_streams(handles, cancel)
        failed = [h for h in handles if h.error is not None]
        for handle in failed:
            err_console.print(
                f"[red]Error:[/red] log stream for container '{handle.container}' failed:"
                f" {handle.error}"
            )
        if failed and len(failed) == len(handles):
            raise typer.Exit(1)

    @app.command(
        "exec",
        context_settings={"allow_extra_args": True, "ignore_unknown_options": True},
    )
    def exec_in_pod(
        ctx: typer.Context,
        name: Annotated[str, typer.Argument(help="Pod name")],
        namespace: NamespaceOption = None,
        container: ContainerOption = None,
        shell: Annotated[
            str | None,
            typer.Option("--shell", "-s", help="Shell for interactive sessions"),
        ] = None,
    ) -> None:
        """Open a shell in a pod, or run a command given after ``--``.

        Examples:
            kubedev exec api-0
            kubedev exec api-0 -c sidecar --shell sh
            kubedev exec api-0 -- ls -la /app
        """
        command = list(ctx.args)
        try:
            session = get_session()
            if command:
                output = session.streaming.exec_command(
                    name, namespace, command=command, container=container
                )
                console.print(output, end="", markup=False, highlight=False)
                return

            exit_code = session.streaming.exec_shell(
                name,
                namespace,
                shell=shell or session.client.defaults.shell,
                container=container,
            )
        except KubernetesError as e:
            handle_k8s_error(e)
            return

        if exit_code:
            raise typer.Exit(exit_code)
