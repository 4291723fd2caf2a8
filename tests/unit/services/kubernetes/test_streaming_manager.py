"""Unit tests for StreamingManager."""

from __future__ import annotations

import io
import threading
from collections.abc import Iterator
from unittest.mock import MagicMock, PropertyMock, patch

import pytest

from kubedev.integrations.kubernetes.exceptions import (
    KubernetesConnectionError,
    KubernetesNotFoundError,
    PodLogsEmptyError,
)
from kubedev.integrations.kubernetes.models.workloads import PodSummary
from kubedev.services.kubernetes.streaming_manager import LogStreamHandle, StreamingManager

STREAM = "kubernetes.stream.stream"
READ_READY = "kubedev.services.kubernetes.streaming_manager.read_ready"
RAW_MODE = "kubedev.services.kubernetes.streaming_manager.raw_mode"


class FakeResponse:
    """Follow-mode log response yielding byte lines."""

    def __init__(self, lines: list[bytes]) -> None:
        self.lines = lines
        self.closed = False
        self.released = False

    def __iter__(self) -> Iterator[bytes]:
        return iter(self.lines)

    def close(self) -> None:
        self.closed = True

    def release_conn(self) -> None:
        self.released = True


def make_ws(stdout: list[str] | None = None, returncode: int | None = 0) -> MagicMock:
    """A websocket client that stays open for one round per stdout chunk."""
    chunks = list(stdout or [])
    ws = MagicMock()
    ws.is_open.side_effect = [True] * max(len(chunks), 1) + [False]
    ws.peek_stdout.side_effect = lambda: bool(chunks)
    ws.read_stdout.side_effect = lambda: chunks.pop(0)
    ws.peek_stderr.return_value = False
    ws.returncode = returncode
    return ws


@pytest.fixture
def workloads() -> MagicMock:
    mock = MagicMock()
    mock.get_pod.return_value = PodSummary(
        name="api-0", namespace="default", container_names=["api", "sidecar"]
    )
    return mock


@pytest.fixture
def streaming(mock_k8s_client: MagicMock, workloads: MagicMock) -> StreamingManager:
    """Create a StreamingManager over a mocked WorkloadManager."""
    return StreamingManager(mock_k8s_client, workloads=workloads)


class TestExecShell:
    """Tests for interactive exec sessions."""

    @pytest.mark.unit
    @pytest.mark.kubernetes
    def test_exec_shell_relays_output(
        self, streaming: StreamingManager, mock_k8s_client: MagicMock
    ) -> None:
        """Should open a TTY exec in the first container and relay stdout."""
        ws = make_ws(stdout=["$ ", "bye\n"], returncode=0)
        stdout = io.StringIO()

        with patch(STREAM, return_value=ws) as mock_stream, patch(READ_READY, return_value=False):
            code = streaming.exec_shell(
                "api-0", stdin=io.StringIO(), stdout=stdout, stderr=io.StringIO()
            )

        assert code == 0
        assert stdout.getvalue() == "$ bye\n"
        mock_stream.assert_called_once_with(
            mock_k8s_client.core_v1.connect_get_namespaced_pod_exec,
            name="api-0",
            namespace="default",
            container="api",
            command=["bash"],
            stdin=True,
            stdout=True,
            stderr=True,
            tty=True,
            _preload_content=False,
        )
        ws.close.assert_called_once()

    @pytest.mark.unit
    @pytest.mark.kubernetes
    def test_exec_shell_forwards_input(self, streaming: StreamingManager) -> None:
        ws = make_ws(stdout=["a", "b"])

        with patch(STREAM, return_value=ws), patch(READ_READY, side_effect=[True, False]):
            streaming.exec_shell(
                "api-0",
                shell="sh",
                container="sidecar",
                stdin=io.StringIO("l"),
                stdout=io.StringIO(),
                stderr=io.StringIO(),
            )

        ws.write_stdin.assert_called_once_with("l")

    @pytest.mark.unit
    @pytest.mark.kubernetes
    def test_exec_shell_uses_raw_mode(self, streaming: StreamingManager) -> None:
        stdin = io.StringIO()

        with (
            patch(STREAM, return_value=make_ws()),
            patch(READ_READY, return_value=False),
            patch(RAW_MODE) as mock_raw,
        ):
            streaming.exec_shell("api-0", stdin=stdin, stdout=io.StringIO(), stderr=io.StringIO())

        mock_raw.assert_called_once_with(stdin)
        mock_raw.return_value.__exit__.assert_called_once()

    @pytest.mark.unit
    @pytest.mark.kubernetes
    def test_exec_shell_no_containers(
        self, streaming: StreamingManager, workloads: MagicMock
    ) -> None:
        """Should fail before opening a channel when the pod has no containers."""
        workloads.get_pod.return_value = PodSummary(name="api-0", container_names=[])

        with patch(STREAM) as mock_stream, pytest.raises(KubernetesNotFoundError):
            streaming.exec_shell("api-0")

        mock_stream.assert_not_called()

    @pytest.mark.unit
    @pytest.mark.kubernetes
    def test_exec_shell_unknown_container(self, streaming: StreamingManager) -> None:
        with patch(STREAM) as mock_stream, pytest.raises(KubernetesNotFoundError, match="db"):
            streaming.exec_shell("api-0", container="db")

        mock_stream.assert_not_called()

    @pytest.mark.unit
    @pytest.mark.kubernetes
    def test_exec_shell_dropped_session(self, streaming: StreamingManager) -> None:
        """Should raise a connection error and still close the channel."""
        ws = make_ws()
        ws.update.side_effect = OSError("connection reset")

        with (
            patch(STREAM, return_value=ws),
            patch(READ_READY, return_value=False),
            pytest.raises(KubernetesConnectionError),
        ):
            streaming.exec_shell(
                "api-0", stdin=io.StringIO(), stdout=io.StringIO(), stderr=io.StringIO()
            )

        ws.close.assert_called_once()

    @pytest.mark.unit
    @pytest.mark.kubernetes
    def test_exec_shell_without_status(self, streaming: StreamingManager) -> None:
        """Should return None when the server reports no exit status."""
        ws = make_ws()
        type(ws).returncode = PropertyMock(side_effect=TypeError("no status"))

        with patch(STREAM, return_value=ws), patch(READ_READY, return_value=False):
            code = streaming.exec_shell(
                "api-0", stdin=io.StringIO(), stdout=io.StringIO(), stderr=io.StringIO()
            )

        assert code is None

    @pytest.mark.unit
    @pytest.mark.kubernetes
    def test_exec_shell_open_error(
        self, streaming: StreamingManager, mock_k8s_client: MagicMock
    ) -> None:
        mock_k8s_client.translate_api_exception.side_effect = RuntimeError("Translated error")

        with (
            patch(STREAM, side_effect=Exception("handshake")),
            pytest.raises(RuntimeError, match="Translated error"),
        ):
            streaming.exec_shell("api-0")


class TestExecCommand:
    """Tests for one-shot exec."""

    @pytest.mark.unit
    @pytest.mark.kubernetes
    def test_exec_command(self, streaming: StreamingManager, mock_k8s_client: MagicMock) -> None:
        with patch(STREAM, return_value="total 0\n") as mock_stream:
            result = streaming.exec_command("api-0", command=["ls", "-la"])

        assert result == "total 0\n"
        kwargs = mock_stream.call_args.kwargs
        assert kwargs["command"] == ["ls", "-la"]
        assert kwargs["container"] == "api"
        assert kwargs["tty"] is False


class TestStreamLog:
    """Tests for multi-container log following."""

    @pytest.mark.unit
    @pytest.mark.kubernetes
    def test_streams_every_container(
        self, streaming: StreamingManager, mock_k8s_client: MagicMock
    ) -> None:
        """Should open one follow stream per container into one sink."""
        responses = {
            "api": FakeResponse([b"2024-05-01T12:00:00.1Z api line\n"]),
            "sidecar": FakeResponse([b"2024-05-01T12:00:00.2Z sidecar line\n"]),
        }
        mock_k8s_client.core_v1.read_namespaced_pod_log.side_effect = (
            lambda **kwargs: responses[kwargs["container"]]
        )
        sink = io.StringIO()

        handles = streaming.stream_log("api-0", sink=sink, since_seconds=30)
        for handle in handles:
            handle.join(5)

        assert [h.container for h in handles] == ["api", "sidecar"]
        assert all(h.error is None for h in handles)
        assert "api line" in sink.getvalue()
        assert "sidecar line" in sink.getvalue()
        assert all(r.released for r in responses.values())
        for c in mock_k8s_client.core_v1.read_namespaced_pod_log.call_args_list:
            assert c.kwargs["follow"] is True
            assert c.kwargs["timestamps"] is True
            assert c.kwargs["since_seconds"] == 30
            assert c.kwargs["_preload_content"] is False

    @pytest.mark.unit
    @pytest.mark.kubernetes
    def test_failed_container_does_not_stop_others(
        self, streaming: StreamingManager, mock_k8s_client: MagicMock
    ) -> None:
        """Should report the failing container on its handle only."""

        def open_log(**kwargs: object) -> FakeResponse:
            if kwargs["container"] == "sidecar":
                raise Exception("container not found")
            return FakeResponse([b"still here\n"])

        mock_k8s_client.core_v1.read_namespaced_pod_log.side_effect = open_log
        mock_k8s_client.translate_api_exception.side_effect = (
            lambda e, **kw: KubernetesNotFoundError(**kw)
        )
        sink = io.StringIO()

        handles = streaming.stream_log("api-0", sink=sink)
        for handle in handles:
            handle.join(5)

        api, sidecar = handles
        assert api.error is None
        assert isinstance(sidecar.error, KubernetesNotFoundError)
        assert sink.getvalue() == "still here\n"

    @pytest.mark.unit
    @pytest.mark.kubernetes
    def test_no_containers(self, streaming: StreamingManager, workloads: MagicMock) -> None:
        workloads.get_pod.return_value = PodSummary(name="api-0", container_names=[])

        with pytest.raises(KubernetesNotFoundError, match="no containers"):
            streaming.stream_log("api-0", sink=io.StringIO())

    @pytest.mark.unit
    @pytest.mark.kubernetes
    def test_cancel_stops_streams(
        self, streaming: StreamingManager, mock_k8s_client: MagicMock
    ) -> None:
        mock_k8s_client.core_v1.read_namespaced_pod_log.side_effect = lambda **kw: FakeResponse(
            [b"one\n", b"two\n"]
        )
        cancel = threading.Event()
        cancel.set()
        sink = io.StringIO()

        handles = streaming.stream_log("api-0", sink=sink, cancel=cancel)
        for handle in handles:
            handle.join(5)

        assert sink.getvalue() == ""
        assert all(h.error is None for h in handles)

    @pytest.mark.unit
    @pytest.mark.kubernetes
    def test_cancel_closes_idle_streams(
        self, streaming: StreamingManager, mock_k8s_client: MagicMock
    ) -> None:
        """Should close streams that never deliver another chunk once cancelled."""

        class IdleResponse(FakeResponse):
            def __init__(self) -> None:
                super().__init__([])
                self._closed_event = threading.Event()

            def __iter__(self) -> Iterator[bytes]:
                self._closed_event.wait(10)
                return iter([])

            def close(self) -> None:
                super().close()
                self._closed_event.set()

        responses: list[IdleResponse] = []

        def open_log(**kwargs: object) -> IdleResponse:
            response = IdleResponse()
            responses.append(response)
            return response

        mock_k8s_client.core_v1.read_namespaced_pod_log.side_effect = open_log
        cancel = threading.Event()

        handles = streaming.stream_log("api-0", sink=io.StringIO(), cancel=cancel)
        cancel.set()
        for handle in handles:
            handle.join(5)

        assert not any(h.is_alive() for h in handles)
        assert len(responses) == 2
        assert all(r.closed for r in responses)
        assert all(h.error is None for h in handles)


class TestLogStreamHandle:
    """Tests for a single log stream handle."""

    @pytest.mark.unit
    @pytest.mark.kubernetes
    def test_broken_stream_sets_error(self) -> None:
        class Broken(FakeResponse):
            def __iter__(self) -> Iterator[bytes]:
                yield b"first\n"
                raise OSError("reset")

        sink = io.StringIO()
        handle = LogStreamHandle("api", lambda c: Broken([]), sink, threading.Lock())

        handle.start()
        handle.join(5)

        assert sink.getvalue() == "first\n"
        assert isinstance(handle.error, KubernetesConnectionError)

    @pytest.mark.unit
    @pytest.mark.kubernetes
    def test_stop_closes_response(self) -> None:
        response = FakeResponse([])
        handle = LogStreamHandle("api", lambda c: response, io.StringIO(), threading.Lock())

        handle.start()
        handle.wait_ready(5)
        handle.join(5)
        handle.stop()

        assert response.closed


class TestPodLogs:
    """Tests for snapshot log reads."""

    @pytest.mark.unit
    @pytest.mark.kubernetes
    def test_get_pod_logs(self, streaming: StreamingManager, mock_k8s_client: MagicMock) -> None:
        """Should return one entry per line."""
        mock_k8s_client.core_v1.read_namespaced_pod_log.return_value = (
            "2024-05-01T12:00:00.123Z started\n"
            "2024-05-01T14:00:00.5+02:00 listening on :8080\n"
            "no timestamp here\n"
        )

        entries = streaming.get_pod_logs("api-0", container="api")

        assert len(entries) == 3
        assert entries[0].timestamp == "2024-05-01T12:00:00.123Z"
        assert entries[1].message == "listening on :8080"
        assert entries[2].timestamp is None
        mock_k8s_client.core_v1.read_namespaced_pod_log.assert_called_once_with(
            name="api-0", namespace="default", timestamps=True, container="api"
        )

    @pytest.mark.unit
    @pytest.mark.kubernetes
    def test_get_pod_logs_keeps_carriage_returns(
        self, streaming: StreamingManager, mock_k8s_client: MagicMock
    ) -> None:
        """Should split on newlines only so progress output stays one entry."""
        mock_k8s_client.core_v1.read_namespaced_pod_log.return_value = (
            "2024-05-01T12:00:00.1Z 50%\r100%\nnext\n"
        )

        entries = streaming.get_pod_logs("api-0")

        assert len(entries) == 2
        assert entries[0].timestamp == "2024-05-01T12:00:00.1Z"
        assert entries[0].message == "50%\r100%"
        assert entries[1].message == "next"

    @pytest.mark.unit
    @pytest.mark.kubernetes
    def test_get_pod_logs_empty(
        self, streaming: StreamingManager, mock_k8s_client: MagicMock
    ) -> None:
        mock_k8s_client.core_v1.read_namespaced_pod_log.return_value = ""

        with pytest.raises(PodLogsEmptyError):
            streaming.get_pod_logs("api-0")

    @pytest.mark.unit
    @pytest.mark.kubernetes
    def test_stream_logs_snapshot(
        self, streaming: StreamingManager, mock_k8s_client: MagicMock
    ) -> None:
        mock_k8s_client.core_v1.read_namespaced_pod_log.return_value = "a\nb\n"

        result = streaming.stream_logs("api-0", tail_lines=10, previous=True)

        assert result == "a\nb\n"
        mock_k8s_client.core_v1.read_namespaced_pod_log.assert_called_once_with(
            name="api-0", namespace="default", tail_lines=10, previous=True
        )

    @pytest.mark.unit
    @pytest.mark.kubernetes
    def test_stream_logs_follow(
        self, streaming: StreamingManager, mock_k8s_client: MagicMock
    ) -> None:
        mock_k8s_client.core_v1.read_namespaced_pod_log.return_value = FakeResponse(
            [b"a\n", b"b\n"]
        )

        result = streaming.stream_logs("api-0", follow=True)

        assert list(result) == ["a\n", "b\n"]
