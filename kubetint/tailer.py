"""
Log tailing for a single pod.

A StreamTailer owns one pod's follow-mode log connection and turns it into
an async sequence of render instructions. It moves through
CONNECTING -> STREAMING -> ENDED | FAILED:

- ENDED: the API server closed the stream without error (pod terminated,
  container restarted, connection closed remotely).
- FAILED: the stream could not be opened (ConnectError), a line was not
  valid UTF-8 (DecodeError) or reading broke mid-stream (StreamError).

A failure is raised out of ``instructions()`` after the state is recorded.
It only concerns this tailer. Reads block in an executor thread; the tailer
suspends only while waiting for the next line. Whenever the sequence stops
(end, failure, cancellation) the log stream is closed.

Example:
    ```python
    tailer = StreamTailer(cluster, "prod", source, tail_lines=100,
                          highlight=NO_HIGHLIGHT, filter_only=False)
    async for instruction in tailer.instructions():
        renderer.render(instruction)
    ```
"""

import asyncio
import logging
from concurrent.futures import Executor
from typing import AsyncIterator, Optional

from .classifier import classify
from .exceptions import ConnectError, DecodeError, StreamError, TailError
from .kube import ClusterClient
from .logging_utils import log_exception
from .models import (
    HighlightRule, RenderCategory, RenderInstruction, SourceIdentity, TailOutcome, TailerState,
)

log = logging.getLogger('kubetint')

_EOF = object()


class StreamTailer:
    """
    Follows one pod's log stream.

    Highlight rule and filter mode are bound at construction and never change.

    Attributes:
        source: Pod name and color of this tailer
        state: Current TailerState
        error: The TailError that ended the tailer, if any
        lines_received: Lines pulled from the stream
        lines_rendered: Render instructions emitted
    """

    def __init__(
        self,
        cluster: ClusterClient,
        namespace: str,
        source: SourceIdentity,
        tail_lines: int,
        highlight: HighlightRule,
        filter_only: bool,
        executor: Optional[Executor] = None,
    ):
        self.cluster = cluster
        self.namespace = namespace
        self.source = source
        self.tail_lines = tail_lines
        self.highlight = highlight
        self.filter_only = filter_only
        self.executor = executor
        self.state = TailerState.CONNECTING
        self.error: Optional[TailError] = None
        self.lines_received = 0
        self.lines_rendered = 0

    @property
    def pod_name(self) -> str:
        return self.source.pod_name

    def fail(self, error: TailError) -> TailError:
        """Record the error that ended this tailer and return it for raising."""
        self.state = TailerState.FAILED
        self.error = error
        return error

    def outcome(self) -> TailOutcome:
        return TailOutcome(
            pod_name=self.pod_name,
            state=self.state,
            lines_received=self.lines_received,
            lines_rendered=self.lines_rendered,
            error=self.error,
        )

    async def instructions(self) -> AsyncIterator[RenderInstruction]:
        """
        Stream render instructions until the pod's log stream ends.

        Raises:
            ConnectError: If the log stream cannot be opened
            DecodeError: If a line is not valid UTF-8
            StreamError: If reading fails mid-stream
        """
        pod = self.pod_name
        loop = asyncio.get_running_loop()
        log.debug(f"[tail] connecting pod={pod} tail={self.tail_lines}")
        try:
            stream = await self.cluster.open_log_stream(
                self.namespace, pod, self.tail_lines, executor=self.executor
            )
        except Exception as e:
            raise self.fail(ConnectError(pod, f"could not open log stream: {e}", e)) from e

        self.state = TailerState.STREAMING
        log.info(f"[tail] streaming pod={pod}")
        lines = iter(stream)
        try:
            while True:
                try:
                    raw = await loop.run_in_executor(self.executor, next, lines, _EOF)
                except Exception as e:
                    raise self.fail(StreamError(pod, f"log stream broke: {e}", e)) from e
                if raw is _EOF:
                    break
                self.lines_received += 1

                try:
                    text = raw.decode('utf-8')
                except UnicodeDecodeError as e:
                    raise self.fail(
                        DecodeError(pod, f"line {self.lines_received} is not valid UTF-8", e)
                    ) from e

                category = classify(text, self.highlight, self.filter_only)
                if category is RenderCategory.SUPPRESSED:
                    continue
                self.lines_rendered += 1
                yield RenderInstruction(self.source, category, text)

            self.state = TailerState.ENDED
            log.info(f"[tail] stream ended pod={pod} lines={self.lines_received}")
        finally:
            try:
                stream.close()
            except Exception as e:
                log_exception(f"[tail] closing stream of {pod} failed", e, logging.DEBUG)


def tail(
    cluster: ClusterClient,
    namespace: str,
    pod_name: str,
    tail_lines: int,
    source: SourceIdentity,
    highlight: HighlightRule,
    filter_only: bool,
    executor: Optional[Executor] = None,
) -> AsyncIterator[RenderInstruction]:
    """
    Lazy sequence of render instructions for one pod.

    Shorthand for ``StreamTailer(...).instructions()`` when the caller does
    not need the tailer's state afterwards.
    """
    if source.pod_name != pod_name:
        raise ValueError(f"source {source.pod_name!r} does not belong to pod {pod_name!r}")
    tailer = StreamTailer(cluster, namespace, source, tail_lines, highlight, filter_only, executor)
    return tailer.instructions()
