"""Tests for CLI output rendering."""

from __future__ import annotations

import io
import json

import pytest
import yaml
from rich.console import Console
from rich.text import Text

from kubedev.cli.output import OutputFormat, _cell, render_list, render_resource
from kubedev.integrations.kubernetes.models import PodSummary

COLUMNS = [("name", "Name"), ("ready", "Ready"), ("phase_text", "Status")]


@pytest.fixture
def console() -> Console:
    return Console(file=io.StringIO(), width=200, color_system=None)


def output_of(console: Console) -> str:
    assert isinstance(console.file, io.StringIO)
    return console.file.getvalue()


def pods() -> list[PodSummary]:
    return [
        PodSummary(name="api-0", phase="Running", ready_count=1, container_names=["api"]),
        PodSummary(name="worker-0", phase="Pending", container_names=["worker"]),
    ]


@pytest.mark.unit
class TestCell:
    """Tests for table cell formatting."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (None, "-"),
            (True, "Yes"),
            (False, "No"),
            ([], "-"),
            (["a", "b"], "a, b"),
            (["a", "b", "c", "d", "e"], "a, b, c (+2)"),
            (3, "3"),
        ],
    )
    def test_cell(self, value: object, expected: str) -> None:
        assert _cell(value) == expected

    def test_text_passthrough(self) -> None:
        text = Text("Running", style="green")
        assert _cell(text) is text


@pytest.mark.unit
class TestRenderList:
    """Tests for render_list."""

    def test_table(self, console: Console) -> None:
        render_list(console, pods(), COLUMNS, title="Pods")

        text = output_of(console)
        assert "api-0" in text
        assert "1/1" in text
        assert "Pending" in text
        assert "Total: 2 resources" in text

    def test_json(self, console: Console) -> None:
        render_list(console, pods(), COLUMNS, OutputFormat.JSON)

        data = json.loads(output_of(console))
        assert data["total"] == 2
        assert data["data"][0]["name"] == "api-0"
        assert "pod_ip" not in data["data"][0]

    def test_yaml(self, console: Console) -> None:
        render_list(console, pods(), COLUMNS, OutputFormat.YAML)

        data = yaml.safe_load(output_of(console))
        assert [p["name"] for p in data] == ["api-0", "worker-0"]


@pytest.mark.unit
class TestRenderResource:
    """Tests for render_resource."""

    def test_table(self, console: Console) -> None:
        render_resource(console, pods()[0], title="Pod")

        text = output_of(console)
        assert "phase" in text
        assert "Running" in text

    def test_json(self, console: Console) -> None:
        render_resource(console, pods()[0], OutputFormat.JSON)

        assert json.loads(output_of(console))["container_names"] == ["api"]
