"""
Kubernetes client and API interactions for Kubetint.

This module provides the interface between Kubetint and the Kubernetes API.
It handles configuration loading, pod listing, pod lookup and opening
follow-mode log streams. Blocking client calls run in an executor so they
can be awaited from the event loop.

Key Components:
- ClusterClient: Async facade over CoreV1Api used by the rest of Kubetint
- LogStream: Iterates a log response line by line as raw bytes
- load_kube: Initialize the Kubernetes client with config loading
- current_context: Name of the kubeconfig context in use

The module supports both external kubeconfig files and in-cluster
configuration, with automatic fallback between the two.

Example:
    ```python
    cluster = await load_kube(kubeconfig=None, context=None)
    pods = await cluster.list_pods("default")
    stream = await cluster.open_log_stream("default", "api-7d9f-x2k", tail_lines=100)
    for line in stream:
        print(line.decode("utf-8"))
    ```
"""

from __future__ import annotations
import asyncio
import threading
from concurrent.futures import Executor
from typing import Iterator, List, Optional

from kubernetes import client, config
from kubernetes.client import ApiException

from .constants import CONNECT_TIMEOUT_SECONDS, LOG_STREAM_CHUNK_BYTES
from .exceptions import KubernetesConnectionError


class LogStream:
    """
    Line iterator over a follow-mode pod log response.

    The API server sends the log as an HTTP body of arbitrary chunks. This
    class re-splits them on ``\\n`` and yields one line of raw bytes at a
    time, without the terminator. Iteration blocks while waiting for data
    and ends when the server closes the response.

    ``close()`` may be called from any thread. It shuts the connection down,
    which makes a read blocked in another thread return or raise.

    Args:
        response: urllib3 response returned with ``_preload_content=False``
        chunk_size: Bytes requested per read
    """

    def __init__(self, response, chunk_size: int = LOG_STREAM_CHUNK_BYTES):
        self._response = response
        self._chunk_size = chunk_size
        self._closed = threading.Event()

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def __iter__(self) -> Iterator[bytes]:
        buffer = b""
        for chunk in self._response.stream(self._chunk_size, decode_content=True):
            if self._closed.is_set():
                return
            buffer += chunk
            while b"\n" in buffer:
                line, buffer = buffer.split(b"\n", 1)
                yield line.rstrip(b"\r")
        if buffer and not self._closed.is_set():
            yield buffer.rstrip(b"\r")

    def close(self) -> None:
        """Close the underlying connection. Safe to call more than once."""
        if self._closed.is_set():
            return
        self._closed.set()
        # interrupts a read blocked in another thread
        self._response.shutdown()
        self._response.close()
        self._response.release_conn()


class ClusterClient:
    """
    Async facade over the Kubernetes CoreV1Api.

    Every method runs the blocking client call in an executor and can be
    awaited from the event loop. Errors from the client (ApiException,
    urllib3 errors) are propagated unchanged; callers map them to their own
    error types.

    Attributes:
        core: CoreV1Api client for pod operations
        connect_timeout: Seconds allowed to establish a log stream connection
        server: API server URL (for display)
    """

    def __init__(self, core: client.CoreV1Api, connect_timeout: float = CONNECT_TIMEOUT_SECONDS):
        self.core = core
        self.connect_timeout = connect_timeout

    @property
    def server(self) -> str:
        try:
            return self.core.api_client.configuration.host
        except AttributeError:
            return "unknown"

    async def list_pods(self, namespace: str) -> List[client.V1Pod]:
        """List all pods in a namespace."""
        loop = asyncio.get_running_loop()

        def _list():
            return self.core.list_namespaced_pod(namespace=namespace).items or []

        return await loop.run_in_executor(None, _list)

    async def get_pod(self, namespace: str, name: str) -> Optional[client.V1Pod]:
        """
        Fetch a specific pod by name and namespace.

        Returns None if the pod is not found (404 error), but raises other API exceptions.
        """
        loop = asyncio.get_running_loop()

        def _get():
            try:
                return self.core.read_namespaced_pod(name=name, namespace=namespace)
            except ApiException as e:
                if e.status == 404:
                    return None
                raise

        return await loop.run_in_executor(None, _get)

    async def open_log_stream(
        self,
        namespace: str,
        pod: str,
        tail_lines: int,
        follow: bool = True,
        executor: Optional[Executor] = None,
    ) -> LogStream:
        """
        Open a log stream for a pod.

        Requests the last ``tail_lines`` lines as backlog and, when following,
        keeps the connection open for new lines. Only the connect phase is
        bounded by ``connect_timeout``; reads wait indefinitely.

        Raises:
            ApiException: If the API server rejects the request (pod missing,
                container not started, forbidden, ...)
        """
        loop = asyncio.get_running_loop()

        def _open():
            resp = self.core.read_namespaced_pod_log(
                name=pod,
                namespace=namespace,
                follow=follow,
                tail_lines=tail_lines,
                _preload_content=False,
                _request_timeout=(self.connect_timeout, None),
            )
            return LogStream(resp)

        return await loop.run_in_executor(executor, _open)


async def load_kube(
    kubeconfig: Optional[str],
    context: Optional[str],
    connect_timeout: float = CONNECT_TIMEOUT_SECONDS,
) -> ClusterClient:
    """
    Load Kubernetes configuration and create the cluster client.

    Uses the given kubeconfig/context when provided, otherwise the default
    kubeconfig with a fallback to in-cluster configuration.

    Args:
        kubeconfig: Path to kubeconfig file (optional, uses default if None)
        context: Kubernetes context name (optional, uses current context if None)
        connect_timeout: Seconds allowed to establish log stream connections

    Returns:
        ClusterClient: Client ready for pod and log operations

    Raises:
        KubernetesConnectionError: If no configuration can be loaded
    """
    def _load():
        if kubeconfig or context:
            config.load_kube_config(config_file=kubeconfig, context=context)
        else:
            try:
                config.load_kube_config()
            except Exception:
                config.load_incluster_config()
        return client.CoreV1Api()

    loop = asyncio.get_running_loop()
    try:
        core = await loop.run_in_executor(None, _load)
    except Exception as e:
        raise KubernetesConnectionError(f"Failed to load Kubernetes configuration: {e}") from e
    return ClusterClient(core, connect_timeout=connect_timeout)


def current_context(kubeconfig: Optional[str], context: Optional[str]) -> str:
    """
    Name of the kubeconfig context in use.

    Returns the explicit context when one was given, the active context of
    the kubeconfig otherwise, or ``in-cluster`` when no kubeconfig exists.
    """
    if context:
        return context
    try:
        _, active = config.list_kube_config_contexts(config_file=kubeconfig)
    except Exception:
        return "in-cluster"
    return (active or {}).get("name", "unknown")
