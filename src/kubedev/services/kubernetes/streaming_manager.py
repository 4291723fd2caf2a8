"""Streaming operations manager for Kubernetes.

Provides interactive shells, one-shot exec, follow-mode log streaming
from every container of a pod, and parsed snapshot log reads.
"""

from __future__ import annotations

import sys
import threading
from collections.abc import Iterator
from typing import TYPE_CHECKING, Any, TextIO

from kubedev.integrations.kubernetes.exceptions import (
    KubernetesConnectionError,
    KubernetesError,
    KubernetesNotFoundError,
    PodLogsEmptyError,
)
from kubedev.integrations.kubernetes.models.logs import LogEntry
from kubedev.services.kubernetes.base import K8sBaseManager
from kubedev.services.kubernetes.workload_manager import WorkloadManager
from kubedev.utils.terminal import raw_mode, read_ready

if TYPE_CHECKING:
    from kubedev.integrations.kubernetes.client import KubernetesClient

DEFAULT_LOG_WINDOW = 120
DEFAULT_SHELL = "bash"
CANCEL_POLL_INTERVAL = 0.5


class LogStreamHandle:
    """A follow-mode log stream for one container, pumped by a daemon thread.

    The stream ends when the container log ends, on ``stop()``, or when the
    shared ``cancel`` event is set; ``stream_log`` closes idle responses as
    soon as ``cancel`` fires.

    ``error`` holds the translated failure when the stream could not be
    opened or broke while reading; it stays None for streams that end
    normally or are stopped.
    """

    def __init__(
        self,
        container: str,
        open_stream: Any,
        sink: TextIO,
        write_lock: threading.Lock,
        cancel: threading.Event | None = None,
    ) -> None:
        self.container = container
        self.error: KubernetesError | None = None
        self._open_stream = open_stream
        self._sink = sink
        self._write_lock = write_lock
        self._cancel = cancel
        self._stopped = threading.Event()
        self._ready = threading.Event()
        self._response: Any = None
        self._thread = threading.Thread(
            target=self._run, name=f"kubedev-logs-{container}", daemon=True
        )

    def start(self) -> None:
        self._thread.start()

    def wait_ready(self, timeout: float | None = None) -> bool:
        """Block until the stream setup has been attempted."""
        return self._ready.wait(timeout)

    def is_alive(self) -> bool:
        return self._thread.is_alive()

    def stop(self) -> None:
        """Stop pumping and close the underlying HTTP response."""
        self._stopped.set()
        if self._response is not None:
            self._response.close()

    def join(self, timeout: float | None = None) -> None:
        self._thread.join(timeout)

    def _should_stop(self) -> bool:
        return self._stopped.is_set() or (self._cancel is not None and self._cancel.is_set())

    def _run(self) -> None:
        try:
            self._response = self._open_stream(self.container)
        except KubernetesError as e:
            self.error = e
            return
        finally:
            self._ready.set()

        if self._should_stop():
            self._response.close()
            self._response.release_conn()
            return

        try:
            for chunk in self._response:
                if self._should_stop():
                    break
                if isinstance(chunk, bytes):
                    chunk = chunk.decode("utf-8", errors="replace")
                with self._write_lock:
                    self._sink.write(chunk)
                    self._sink.flush()
        except Exception as e:
            if not self._should_stop():
                self.error = KubernetesConnectionError(
                    message=f"Log stream for container '{self.container}' broke",
                    original_error=e,
                )
        finally:
            if self._response is not None:
                self._response.release_conn()


def _stop_on_cancel(cancel: threading.Event, handles: list[LogStreamHandle]) -> None:
    """Stop every handle once ``cancel`` is set; return early when all have ended."""
    while not cancel.wait(CANCEL_POLL_INTERVAL):
        if not any(handle.is_alive() for handle in handles):
            return
    for handle in handles:
        handle.stop()


class StreamingManager(K8sBaseManager):
    """Manager for streaming Kubernetes operations.

    Handles interactive shells, non-interactive exec, live log streams and
    snapshot log reads for pods.
    """

    _entity_name = "streaming"

    def __init__(
        self, client: KubernetesClient, *, workloads: WorkloadManager | None = None
    ) -> None:
        super().__init__(client)
        self._workloads = workloads or WorkloadManager(client)

    def _select_container(self, pod_name: str, namespace: str, container: str | None) -> str:
        """Pick the exec target: ``container`` if given, else the first container.

        Raises:
            KubernetesNotFoundError: The pod has no containers, or no container
                named ``container``.
        """
        pod = self._workloads.get_pod(pod_name, namespace)
        if not pod.container_names:
            raise KubernetesNotFoundError(
                message=f"Pod '{pod_name}' has no containers",
                resource_type="Container",
                namespace=namespace,
            )
        if container is None:
            return pod.container_names[0]
        if container not in pod.container_names:
            raise KubernetesNotFoundError(
                resource_type="Container", resource_name=container, namespace=namespace
            )
        return container

    # =========================================================================
    # Exec
    # =========================================================================

    def exec_shell(
        self,
        pod_name: str,
        namespace: str | None = None,
        *,
        shell: str = DEFAULT_SHELL,
        container: str | None = None,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
    ) -> int | None:
        """Open an interactive shell in a pod container.

        The local input stream is put in raw mode for the length of the
        session when it is a terminal, and restored however the session ends.

        Args:
            pod_name: Pod name.
            namespace: Target namespace.
            shell: Shell binary to run in the container.
            container: Container name (defaults to the first container).
            stdin: Local input (defaults to sys.stdin).
            stdout: Local output for remote stdout (defaults to sys.stdout).
            stderr: Local output for remote stderr (defaults to sys.stderr).

        Returns:
            The remote exit code, or None when the server reported none.

        Raises:
            KubernetesNotFoundError: Pod or container could not be resolved.
            KubernetesConnectionError: The exec channel dropped.
        """
        import kubernetes.stream

        stdin = stdin or sys.stdin
        stdout = stdout or sys.stdout
        stderr = stderr or sys.stderr

        ns = self._resolve_namespace(namespace)
        target = self._select_container(pod_name, ns, container)
        self._log.debug("exec_shell", pod=pod_name, namespace=ns, container=target, shell=shell)

        try:
            ws_client = kubernetes.stream.stream(
                self._client.core_v1.connect_get_namespaced_pod_exec,
                name=pod_name,
                namespace=ns,
                container=target,
                command=[shell],
                stdin=True,
                stdout=True,
                stderr=True,
                tty=True,
                _preload_content=False,
            )
        except Exception as e:
            self._handle_api_error(e, "Pod", pod_name, ns)

        try:
            with raw_mode(stdin):
                self._pump_session(ws_client, pod_name, stdin, stdout, stderr)
        finally:
            ws_client.close()

        return self._exit_code(ws_client)

    def _pump_session(
        self, ws_client: Any, pod_name: str, stdin: TextIO, stdout: TextIO, stderr: TextIO
    ) -> None:
        """Relay local input and remote output until the channel closes."""
        input_open = True
        try:
            while ws_client.is_open():
                ws_client.update(timeout=0.1)
                if ws_client.peek_stdout():
                    stdout.write(ws_client.read_stdout())
                    stdout.flush()
                if ws_client.peek_stderr():
                    stderr.write(ws_client.read_stderr())
                    stderr.flush()

                if input_open and read_ready(stdin):
                    data = stdin.read(1)
                    if data:
                        ws_client.write_stdin(data)
                    else:
                        input_open = False
        except Exception as e:
            raise KubernetesConnectionError(
                message=f"Exec session to pod '{pod_name}' dropped",
                original_error=e,
            ) from e

    def _exit_code(self, ws_client: Any) -> int | None:
        try:
            code: int | None = ws_client.returncode
        except (TypeError, KeyError, IndexError, ValueError):
            self._log.debug("exec_no_status")
            return None
        self._log.debug("exec_finished", returncode=code)
        return code

    def exec_command(
        self,
        pod_name: str,
        namespace: str | None = None,
        *,
        command: list[str],
        container: str | None = None,
    ) -> str:
        """Run a command in a pod container and collect its output.

        Args:
            pod_name: Pod name.
            namespace: Target namespace.
            command: Command and arguments.
            container: Container name (defaults to the first container).

        Returns:
            Combined stdout and stderr of the command.
        """
        import kubernetes.stream

        ns = self._resolve_namespace(namespace)
        target = self._select_container(pod_name, ns, container)
        self._log.debug(
            "exec_command", pod=pod_name, namespace=ns, container=target, command=command
        )

        try:
            output: str = kubernetes.stream.stream(
                self._client.core_v1.connect_get_namespaced_pod_exec,
                name=pod_name,
                namespace=ns,
                container=target,
                command=command,
                stdin=False,
                stdout=True,
                stderr=True,
                tty=False,
            )
            return output
        except Exception as e:
            self._handle_api_error(e, "Pod", pod_name, ns)

    # =========================================================================
    # Log Streaming
    # =========================================================================

    def stream_log(
        self,
        pod_name: str,
        namespace: str | None = None,
        sink: TextIO | None = None,
        *,
        since_seconds: int = DEFAULT_LOG_WINDOW,
        cancel: threading.Event | None = None,
    ) -> list[LogStreamHandle]:
        """Follow the logs of every container of a pod into one sink.

        One daemon thread per container opens a follow stream with
        timestamps and writes its lines to ``sink``; writes are serialized.
        Returns once every container's stream setup has been attempted. A
        container whose stream fails is logged and reported on its handle
        while the other containers keep streaming.

        Args:
            pod_name: Pod name.
            namespace: Target namespace.
            sink: Text stream receiving log lines (defaults to sys.stdout).
            since_seconds: Only lines newer than this many seconds.
            cancel: Set this event to stop every stream; idle streams are
                closed within ``CANCEL_POLL_INTERVAL`` seconds.

        Returns:
            One handle per container, in pod spec order.

        Raises:
            KubernetesNotFoundError: The pod does not exist or has no containers.
        """
        sink = sink or sys.stdout
        ns = self._resolve_namespace(namespace)
        pod = self._workloads.get_pod(pod_name, ns)
        if not pod.container_names:
            raise KubernetesNotFoundError(
                message=f"Pod '{pod_name}' has no containers",
                resource_type="Container",
                namespace=ns,
            )

        def open_stream(container: str) -> Any:
            try:
                return self._client.core_v1.read_namespaced_pod_log(
                    name=pod_name,
                    namespace=ns,
                    container=container,
                    follow=True,
                    since_seconds=since_seconds,
                    timestamps=True,
                    _preload_content=False,
                )
            except Exception as e:
                self._handle_api_error(e, "Pod", pod_name, ns)

        write_lock = threading.Lock()
        handles = [
            LogStreamHandle(container, open_stream, sink, write_lock, cancel)
            for container in pod.container_names
        ]
        self._log.debug("streaming_pod_logs", pod=pod_name, namespace=ns, containers=len(handles))

        for handle in handles:
            handle.start()
        for handle in handles:
            handle.wait_ready()
            if handle.error is not None:
                self._log.error(
                    "log_stream_failed",
                    pod=pod_name,
                    container=handle.container,
                    error=str(handle.error),
                )
        if cancel is not None:
            threading.Thread(
                target=_stop_on_cancel,
                args=(cancel, handles),
                name=f"kubedev-logs-cancel-{pod_name}",
                daemon=True,
            ).start()
        return handles

    def get_pod_logs(
        self,
        pod_name: str,
        namespace: str | None = None,
        *,
        container: str | None = None,
    ) -> list[LogEntry]:
        """Read a pod's current logs once, split into timestamped entries.

        The body is split on newlines only; a carriage return stays part of
        its line. Lines without a recognizable timestamp keep their text
        with a None timestamp.

        Raises:
            PodLogsEmptyError: The read succeeded but returned nothing.
        """
        ns = self._resolve_namespace(namespace)
        self._log.debug("getting_pod_logs", pod=pod_name, namespace=ns, container=container)
        kwargs: dict[str, Any] = {"name": pod_name, "namespace": ns, "timestamps": True}
        if container:
            kwargs["container"] = container

        try:
            body: str = self._client.core_v1.read_namespaced_pod_log(**kwargs)
        except Exception as e:
            self._handle_api_error(e, "Pod", pod_name, ns)

        if not body:
            raise PodLogsEmptyError(pod_name, ns)
        lines = body.split("\n")
        if lines[-1] == "":
            lines.pop()
        return [LogEntry.parse(line) for line in lines]

    def stream_logs(
        self,
        pod_name: str,
        namespace: str | None = None,
        *,
        container: str | None = None,
        follow: bool = False,
        tail_lines: int | None = None,
        previous: bool = False,
        timestamps: bool = False,
        since_seconds: int | None = None,
    ) -> str | Iterator[str]:
        """Get or stream raw logs from a single container.

        Args:
            pod_name: Pod name.
            namespace: Target namespace.
            container: Specific container name.
            follow: Stream logs in real-time.
            tail_lines: Number of lines from the end.
            previous: Logs from previous container instance.
            timestamps: Include timestamps in output.
            since_seconds: Only return logs newer than this many seconds.

        Returns:
            Log content as string (static) or iterator of lines (streaming).
        """
        ns = self._resolve_namespace(namespace)
        self._log.debug(
            "streaming_logs", pod=pod_name, namespace=ns, follow=follow, container=container
        )

        kwargs: dict[str, Any] = {"name": pod_name, "namespace": ns}
        if container:
            kwargs["container"] = container
        if tail_lines is not None:
            kwargs["tail_lines"] = tail_lines
        if previous:
            kwargs["previous"] = previous
        if timestamps:
            kwargs["timestamps"] = timestamps
        if since_seconds is not None:
            kwargs["since_seconds"] = since_seconds

        if follow:
            return self._follow_logs(pod_name, ns, kwargs)

        try:
            logs: str = self._client.core_v1.read_namespaced_pod_log(**kwargs)
            return logs
        except Exception as e:
            self._handle_api_error(e, "Pod", pod_name, ns)

    def _follow_logs(self, pod_name: str, namespace: str, kwargs: dict[str, Any]) -> Iterator[str]:
        try:
            stream = self._client.core_v1.read_namespaced_pod_log(
                follow=True, _preload_content=False, **kwargs
            )
        except Exception as e:
            self._handle_api_error(e, "Pod", pod_name, namespace)

        for line in stream:
            if isinstance(line, bytes):
                yield line.decode("utf-8", errors="replace")
            else:
                yield str(line)
