"""Shared test fixtures: an in-memory cluster and a capturing console."""

import io
import threading
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional

import pytest
from kubernetes import client
from rich.console import Console


def make_pod(
    name: str,
    namespace: str = "default",
    phase: str = "Running",
    ready: bool = True,
    restarts: int = 0,
    containers: Optional[List[str]] = None,
) -> client.V1Pod:
    """Build a V1Pod with one status per container."""
    containers = containers or ["app"]
    return client.V1Pod(
        metadata=client.V1ObjectMeta(
            name=name,
            namespace=namespace,
            uid=f"uid-{name}",
            creation_timestamp=datetime(2024, 1, 1, tzinfo=timezone.utc),
        ),
        spec=client.V1PodSpec(containers=[
            client.V1Container(
                name=c,
                image=f"registry.local/{c}:1.0",
                env=[
                    client.V1EnvVar(name="MODE", value="prod"),
                    client.V1EnvVar(
                        name="TOKEN",
                        value_from=client.V1EnvVarSource(
                            secret_key_ref=client.V1SecretKeySelector(name="creds", key="token"),
                        ),
                    ),
                ],
                resources=client.V1ResourceRequirements(
                    requests={"cpu": "100m", "memory": "128Mi"},
                    limits={"memory": "256Mi"},
                ),
            )
            for c in containers
        ]),
        status=client.V1PodStatus(
            phase=phase,
            host_ip="10.0.0.12",
            pod_ip="10.244.1.23",
            container_statuses=[
                client.V1ContainerStatus(
                    name=c,
                    image=f"registry.local/{c}:1.0",
                    image_id="sha256:abc",
                    ready=ready,
                    restart_count=restarts,
                    state=client.V1ContainerState(running=client.V1ContainerStateRunning()),
                )
                for c in containers
            ],
        ),
    )


class FakeLogStream:
    """Log stream yielding fixed lines, then optionally raising."""

    def __init__(self, lines: Iterable[bytes], error: Optional[Exception] = None):
        self.lines = list(lines)
        self.error = error
        self.closed = False

    def __iter__(self):
        for line in self.lines:
            yield line
        if self.error is not None:
            raise self.error

    def close(self) -> None:
        self.closed = True


class BlockingLogStream(FakeLogStream):
    """Log stream that yields its lines, then blocks like a quiet follow read until closed."""

    def __init__(self, lines: Iterable[bytes] = ()):
        super().__init__(lines)
        self.waiting = threading.Event()
        self._released = threading.Event()

    def __iter__(self):
        yield from self.lines
        self.waiting.set()
        self._released.wait()

    def close(self) -> None:
        self.closed = True
        self._released.set()


class FakeCluster:
    """In-memory stand-in for ClusterClient."""

    server = "https://fake-cluster:6443"

    def __init__(
        self,
        pods: Optional[List[client.V1Pod]] = None,
        streams: Optional[Dict[str, FakeLogStream]] = None,
        connect_errors: Optional[Dict[str, Exception]] = None,
        list_error: Optional[Exception] = None,
        get_error: Optional[Exception] = None,
    ):
        self.pods = pods or []
        self.streams = streams or {}
        self.connect_errors = connect_errors or {}
        self.list_error = list_error
        self.get_error = get_error
        self.opened = []

    async def list_pods(self, namespace: str):
        if self.list_error is not None:
            raise self.list_error
        return [p for p in self.pods if p.metadata.namespace == namespace]

    async def get_pod(self, namespace: str, name: str):
        if self.get_error is not None:
            raise self.get_error
        for p in self.pods:
            if p.metadata.namespace == namespace and p.metadata.name == name:
                return p
        return None

    async def open_log_stream(self, namespace, pod, tail_lines, follow=True, executor=None):
        self.opened.append((namespace, pod, tail_lines))
        if pod in self.connect_errors:
            raise self.connect_errors[pod]
        return self.streams[pod]


def numbered(prefix: str, count: int) -> List[bytes]:
    return [f"{prefix} line {i}".encode("utf-8") for i in range(count)]


@pytest.fixture
def plain_console() -> Console:
    """Console writing uncolored text to a buffer."""
    return Console(file=io.StringIO(), color_system=None, width=200, highlight=False)


@pytest.fixture
def ansi_console() -> Console:
    """Console writing truecolor ANSI output to a buffer."""
    return Console(file=io.StringIO(), force_terminal=True, color_system="truecolor", width=200)


def output_of(console: Console) -> str:
    return console.file.getvalue()
