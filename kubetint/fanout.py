"""
Concurrent log tailing across pods.

The FanOutCoordinator starts one StreamTailer per selected pod, each as its
own asyncio task with a freshly drawn color, and pipes every tailer's
instructions into the shared TerminalRenderer. It waits for all tailers to
stop. One pod failing is logged and recorded in its outcome; the other pods
keep streaming.

There is no timeout: follow mode runs until every stream is closed by the
API server or the process is interrupted. Interruption cancels the tasks,
and each tailer closes its own stream on the way out.

Example:
    ```python
    coordinator = FanOutCoordinator(cluster, TerminalRenderer())
    result = await coordinator.run("prod", {"api-0", "api-1"}, 100, NO_HIGHLIGHT, False)
    for outcome in result.failed:
        print(outcome.pod_name, outcome.error)
    ```
"""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, Optional

from .colors import ColorAssigner
from .exceptions import StreamError, TailError
from .kube import ClusterClient
from .logging_utils import log_exception
from .models import FanOutResult, HighlightRule, SourceIdentity, TailOutcome
from .renderer import TerminalRenderer
from .tailer import StreamTailer

log = logging.getLogger('kubetint')


class FanOutCoordinator:
    """
    Runs one tailer per pod and waits for all of them.

    Args:
        cluster: Cluster client used to open log streams
        renderer: Terminal writer shared by all tailers
        color_assigner: Source of pod label colors
    """

    def __init__(
        self,
        cluster: ClusterClient,
        renderer: TerminalRenderer,
        color_assigner: Optional[ColorAssigner] = None,
    ):
        self.cluster = cluster
        self.renderer = renderer
        self.colors = color_assigner or ColorAssigner()

    async def _drive(self, tailer: StreamTailer) -> TailOutcome:
        instructions = tailer.instructions()
        try:
            async for instruction in instructions:
                self.renderer.render(instruction)
        except TailError as e:
            log_exception(f"[fanout] pod {tailer.pod_name} stopped", e)
        except Exception as e:
            # anything else still ends only this pod
            tailer.fail(StreamError(tailer.pod_name, f"unexpected error: {e}", e))
            log_exception(f"[fanout] pod {tailer.pod_name} stopped unexpectedly", e, logging.ERROR)
        finally:
            await instructions.aclose()
        return tailer.outcome()

    async def run(
        self,
        namespace: str,
        pod_names: Iterable[str],
        tail_lines: int,
        highlight: HighlightRule,
        filter_only: bool,
    ) -> FanOutResult:
        """
        Follow the logs of every pod until all streams have stopped.

        Args:
            namespace: Namespace of the pods
            pod_names: Pods to follow; empty completes immediately
            tail_lines: Backlog lines requested per pod
            highlight: Highlight rule shared by all tailers
            filter_only: Show only highlighted lines

        Returns:
            FanOutResult: One outcome per pod, in pod name order
        """
        names = sorted(set(pod_names))
        if not names:
            log.info(f"[fanout] no pods selected in namespace={namespace}, nothing to tail")
            return FanOutResult(namespace)

        # each follow read holds a thread for as long as the pod logs
        executor = ThreadPoolExecutor(max_workers=len(names), thread_name_prefix='kubetint-tail')
        tailers = [
            StreamTailer(
                self.cluster,
                namespace,
                SourceIdentity(name, self.colors.next()),
                tail_lines,
                highlight,
                filter_only,
                executor=executor,
            )
            for name in names
        ]
        log.info(f"[fanout] tailing {len(tailers)} pod(s) in namespace={namespace}")
        try:
            tasks = [asyncio.ensure_future(self._drive(t)) for t in tailers]
            outcomes = await asyncio.gather(*tasks)
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        result = FanOutResult(namespace, list(outcomes))
        log.info(
            f"[fanout] done namespace={namespace} ended={len(result.ended)} failed={len(result.failed)}"
        )
        return result
