"""Shared options, error handling and prompts for kubedev commands."""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console

from kubedev.cli.output import OutputFormat
from kubedev.integrations.kubernetes.exceptions import (
    KubernetesAuthError,
    KubernetesConflictError,
    KubernetesConnectionError,
    KubernetesError,
    KubernetesNotFoundError,
    KubernetesTimeoutError,
    KubernetesValidationError,
    OperationCancelledError,
    PodLogsEmptyError,
    PodTerminalStateError,
)

console = Console()
err_console = Console(stderr=True)


# =============================================================================
# Common Typer Option Annotations
# =============================================================================

OutputOption = Annotated[
    OutputFormat,
    typer.Option(
        "--output",
        "-o",
        help="Output format: table, json, or yaml",
        case_sensitive=False,
    ),
]

NamespaceOption = Annotated[
    str | None,
    typer.Option(
        "--namespace",
        "-n",
        help="Kubernetes namespace (defaults to the session namespace)",
    ),
]

AllNamespacesOption = Annotated[
    bool,
    typer.Option(
        "--all-namespaces",
        "-A",
        help="List resources across all namespaces",
    ),
]

LabelSelectorOption = Annotated[
    str | None,
    typer.Option(
        "--selector",
        "-l",
        help="Label selector (e.g., 'app=nginx,tier=frontend')",
    ),
]

ContainerOption = Annotated[
    str | None,
    typer.Option(
        "--container",
        "-c",
        help="Container name (defaults to the first container)",
    ),
]

ForceOption = Annotated[
    bool,
    typer.Option(
        "--force",
        "-f",
        help="Skip confirmation prompts",
    ),
]


# =============================================================================
# Error Handling
# =============================================================================


def handle_k8s_error(error: KubernetesError) -> None:
    """Print a readable message for a Kubernetes error and exit.

    Raises:
        typer.Exit: Always exits with code 1.
    """
    if isinstance(error, KubernetesConnectionError):
        err_console.print("[red]Error:[/red] Cannot connect to Kubernetes cluster")
        err_console.print(f"  {error.message}")
        if error.original_error:
            err_console.print(f"  Cause: {error.original_error}")
        err_console.print(
            "\n[dim]Hint: Check that your kubeconfig is valid and the cluster is reachable.[/dim]"
        )

    elif isinstance(error, KubernetesAuthError):
        err_console.print("[red]Error:[/red] Authentication/authorization failed")
        err_console.print(f"  {error.message}")
        err_console.print("\n[dim]Hint: Check your credentials, token, or RBAC permissions.[/dim]")

    elif isinstance(error, PodTerminalStateError):
        err_console.print(
            f"[red]Error:[/red] Pod '{error.resource_name}' will not become ready"
            f" (phase: {error.phase})"
        )

    elif isinstance(error, PodLogsEmptyError):
        err_console.print(f"[yellow]No logs found for pod '{error.resource_name}'[/yellow]")

    elif isinstance(error, KubernetesNotFoundError):
        err_console.print("[red]Error:[/red] Resource not found")
        err_console.print(f"  {error.message}")

    elif isinstance(error, KubernetesValidationError):
        err_console.print("[red]Error:[/red] Validation failed")
        err_console.print(f"  {error.message}")
        if error.validation_errors:
            err_console.print("\n  Field errors:")
            for field, err in error.validation_errors.items():
                err_console.print(f"    - {field}: {err}")

    elif isinstance(error, KubernetesConflictError):
        err_console.print("[red]Error:[/red] Resource conflict")
        err_console.print(f"  {error.message}")

    elif isinstance(error, KubernetesTimeoutError):
        err_console.print("[red]Error:[/red] Operation timed out")
        err_console.print(f"  {error.message}")
        err_console.print(
            "\n[dim]Hint: Increase the timeout with --timeout or KUBEDEV_TIMEOUT.[/dim]"
        )

    elif isinstance(error, OperationCancelledError):
        err_console.print(f"[yellow]Cancelled:[/yellow] {error.message}")

    else:
        err_console.print(f"[red]Error:[/red] {error.message}")
        if error.status_code:
            err_console.print(f"  HTTP Status: {error.status_code}")

    raise typer.Exit(1)


# =============================================================================
# Confirmation Utilities
# =============================================================================


def confirm_delete(resource_type: str, name: str, namespace: str | None = None) -> bool:
    """Prompt user to confirm deletion."""
    msg = f"Are you sure you want to delete {resource_type} '{name}'"
    if namespace:
        msg += f" in namespace '{namespace}'"
    msg += "?"
    return typer.confirm(msg, default=False)
