"""Output rendering for CLI commands: rich tables, JSON or YAML."""

from __future__ import annotations

import json
from collections.abc import Sequence
from enum import StrEnum
from typing import Any

import yaml
from rich.console import Console
from rich.table import Table
from rich.text import Text


class OutputFormat(StrEnum):
    """Supported output formats for CLI commands."""

    TABLE = "table"
    JSON = "json"
    YAML = "yaml"


def _dump(resource: Any) -> Any:
    return resource.model_dump(exclude_none=True) if hasattr(resource, "model_dump") else resource


def _cell(value: Any) -> str | Text:
    if isinstance(value, Text):
        return value
    if isinstance(value, list):
        if not value:
            return "-"
        items = [str(v) for v in value[:3]]
        result = ", ".join(items)
        if len(value) > 3:
            result += f" (+{len(value) - 3})"
        return result
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if value is None:
        return "-"
    return str(value)


def render_list(
    console: Console,
    resources: Sequence[Any],
    columns: list[tuple[str, str]],
    output: OutputFormat = OutputFormat.TABLE,
    title: str = "",
) -> None:
    """Render resources as a table (one column per ``(attribute, header)``) or as data.

    Table cells are read with ``getattr`` so model properties such as ``age``
    and colorized ``rich.text.Text`` values can be used as columns.
    """
    if output == OutputFormat.JSON:
        data = [_dump(r) for r in resources]
        console.print_json(json.dumps({"data": data, "total": len(data)}, default=str))
        return
    if output == OutputFormat.YAML:
        data = [_dump(r) for r in resources]
        console.print(
            yaml.safe_dump(data, default_flow_style=False, sort_keys=False),
            markup=False,
            highlight=False,
        )
        return

    table = Table(title=title or None, show_header=True)
    for _attr, header in columns:
        style = "cyan" if header.lower() in ("name", "namespace") else None
        table.add_column(header, style=style, overflow="fold")
    for resource in resources:
        table.add_row(*(_cell(getattr(resource, attr, None)) for attr, _ in columns))

    console.print(table)
    console.print(f"\n[dim]Total: {len(resources)} resources[/dim]")


def render_resource(
    console: Console,
    resource: Any,
    output: OutputFormat = OutputFormat.TABLE,
    title: str = "",
) -> None:
    """Render a single resource as a field/value table or as data."""
    data = _dump(resource)
    if output == OutputFormat.JSON:
        console.print_json(json.dumps(data, default=str))
        return
    if output == OutputFormat.YAML:
        console.print(
            yaml.safe_dump(data, default_flow_style=False, sort_keys=False),
            markup=False,
            highlight=False,
        )
        return

    table = Table(title=title or "Resource Details", show_header=True)
    table.add_column("Field", style="cyan", no_wrap=True)
    table.add_column("Value", style="green", overflow="fold")
    for field, value in data.items():
        rendered = json.dumps(value, indent=2) if isinstance(value, dict | list) else _cell(value)
        table.add_row(field, rendered)
    console.print(table)
