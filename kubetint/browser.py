"""
Interactive terminal pod browser.

Shows the pods of a namespace as a table (name, ready, restarts, status) with
the current cluster context, and a describe view for a single pod. The pod
list is fetched again before every prompt so the table stays current. Also
provides the numbered pod pick used by ``kubetint logs`` when neither a pod
nor a pattern is given.

Key Components:
- PodBrowser: Table / describe loop driven by prompts
- choose_pod: Numbered pick of one pod name
- prompt_in_thread: Await a blocking prompt without tying up the loop executor
- format_age: Compact age string (45s, 12m, 3h, 2d)
"""

import asyncio
import logging
import threading
from typing import Callable, List, Optional, Sequence, TypeVar

from rich import box
from rich.console import Console, Group
from rich.panel import Panel
from rich.prompt import IntPrompt, Prompt
from rich.table import Table
from rich.text import Text

from .exceptions import ClusterRequestError, PodNotFoundError, SelectionError
from .kube import ClusterClient
from .models import PodInfo, PodSummary
from .pod_processing import pod_to_summary, pod_to_view
from .validation import sanitize_pod_name

log = logging.getLogger('kubetint')

T = TypeVar("T")


def format_age(seconds: int) -> str:
    if seconds < 60:
        return f"{seconds}s"
    if seconds < 3600:
        return f"{seconds // 60}m"
    if seconds < 86400:
        return f"{seconds // 3600}h"
    return f"{seconds // 86400}d"


def pods_table(pods: Sequence[PodSummary], namespace: str) -> Table:
    """Pod table, one numbered row per pod."""
    table = Table(title=f"Pods in {namespace}", box=box.ROUNDED, header_style="bold")
    table.add_column("#", justify="right")
    table.add_column("Name")
    table.add_column("Ready", justify="center")
    table.add_column("Restarts", justify="right")
    table.add_column("Status")
    for i, p in enumerate(pods):
        status_style = "green" if p.phase == "Running" else "yellow"
        if p.phase in ("Failed", "Unknown"):
            status_style = "red"
        table.add_row(
            str(i),
            sanitize_pod_name(p.name),
            f"{p.ready}/{p.total}",
            str(p.restarts),
            Text(p.phase, style=status_style),
        )
    return table


def describe_panel(info: PodInfo) -> Panel:
    """Describe view of one pod: metadata followed by one block per container."""
    meta = Table.grid(padding=(0, 2))
    meta.add_column(style="bold")
    meta.add_column()
    meta.add_row("Namespace", info.namespace)
    meta.add_row("UID", info.uid or "-")
    meta.add_row("Phase", info.phase)
    meta.add_row("Node", info.node or "-")
    meta.add_row("Pod IP", info.pod_ip or "-")
    meta.add_row("Age", format_age(info.age_seconds))

    parts = [meta]
    for c in info.containers:
        block = Table(title=f"container {c.name}", box=box.SIMPLE, show_header=False, title_justify="left")
        block.add_column(style="bold")
        block.add_column()
        block.add_row("Image", c.image or "-")
        block.add_row("State", c.state)
        block.add_row("Ready", "yes" if c.ready else "no")
        block.add_row("Restarts", str(c.restarts))
        if c.resources.requests:
            block.add_row("Requests", ", ".join(f"{k}={v}" for k, v in c.resources.requests.items()))
        if c.resources.limits:
            block.add_row("Limits", ", ".join(f"{k}={v}" for k, v in c.resources.limits.items()))
        for ev in c.env:
            # env values are arbitrary text, never rich markup
            block.add_row(f"env {ev.name}", Text(ev.value if ev.value is not None else ""))
        parts.append(block)

    return Panel(Group(*parts), title=sanitize_pod_name(info.name), border_style="cyan")


class PodBrowser:
    """
    Prompt-driven pod browser.

    Commands at the prompt: a row number opens the describe view, ``r``
    refreshes, ``q`` quits.

    Args:
        cluster: Cluster client
        namespace: Namespace to browse
        context_name: Kubeconfig context shown under the table
        console: rich Console to draw on
    """

    def __init__(self, cluster: ClusterClient, namespace: str, context_name: str = "", console: Optional[Console] = None):
        self.cluster = cluster
        self.namespace = namespace
        self.context_name = context_name
        self.console = console or Console()
        self.pods: List[PodSummary] = []

    async def refresh(self) -> List[PodSummary]:
        """Fetch the pod list again."""
        try:
            pods = await self.cluster.list_pods(self.namespace)
        except Exception as e:
            raise SelectionError(f"Failed to list pods in namespace {self.namespace!r}: {e}") from e
        self.pods = sorted((pod_to_summary(p) for p in pods), key=lambda s: s.name)
        return self.pods

    async def describe(self, name: str) -> PodInfo:
        try:
            pod = await self.cluster.get_pod(self.namespace, name)
        except Exception as e:
            raise ClusterRequestError(f"Failed to read pod {name!r} in namespace {self.namespace!r}: {e}") from e
        if pod is None:
            raise PodNotFoundError(f"Pod {name!r} not found in namespace {self.namespace!r}")
        return pod_to_view(pod)

    def draw(self) -> None:
        self.console.print(pods_table(self.pods, self.namespace))
        self.console.print(Text(f"context: {self.context_name}  server: {self.cluster.server}", style="cyan"))

    async def handle(self, command: str) -> bool:
        """Run one prompt command. Returns False when the browser should exit."""
        command = command.strip().lower()
        if command in ("q", "quit", "exit"):
            return False
        if command in ("", "r"):
            return True
        if not command.isdigit() or int(command) >= len(self.pods):
            self.console.print(Text(f"unknown command or row: {command}", style="red"))
            return True
        name = self.pods[int(command)].name
        try:
            info = await self.describe(name)
        except (PodNotFoundError, ClusterRequestError) as e:
            self.console.print(Text(str(e), style="red"))
            return True
        self.console.print(describe_panel(info))
        return True

    async def run(self) -> None:
        """Draw, prompt and handle commands until the operator quits or closes stdin."""
        while True:
            await self.refresh()
            self.draw()
            try:
                command = await prompt_in_thread(
                    lambda: Prompt.ask("row number to describe, r to refresh, q to quit", console=self.console, default="r")
                )
            except EOFError:
                return
            if not await self.handle(command):
                return


def _settle(future: asyncio.Future, result, error: Optional[BaseException]) -> None:
    if future.done():
        return
    if error is not None:
        future.set_exception(error)
    else:
        future.set_result(result)


async def prompt_in_thread(ask: Callable[[], T]) -> T:
    """
    Run a blocking prompt on a daemon thread and wait for its answer.

    The loop's default executor is joined at shutdown, so a prompt left
    waiting there would keep Ctrl-C from ending the process. A daemon thread
    is simply abandoned. Errors raised by ``ask`` (EOFError on a closed
    stdin) are raised here.
    """
    loop = asyncio.get_running_loop()
    future = loop.create_future()

    def worker() -> None:
        try:
            result = ask()
        except BaseException as e:
            error, result = e, None
        else:
            error = None
        if not loop.is_closed():
            loop.call_soon_threadsafe(_settle, future, result, error)

    threading.Thread(target=worker, name='kubetint-prompt', daemon=True).start()
    return await future


def choose_pod(names: Sequence[str], console: Optional[Console] = None) -> Optional[str]:
    """
    Numbered pick of one pod name.

    Returns None when there is nothing to choose from or stdin is closed.
    """
    console = console or Console()
    if not names:
        return None
    for i, name in enumerate(names):
        console.print(f"\t{i}: {sanitize_pod_name(name)}", highlight=False)
    choices = [str(i) for i in range(len(names))]
    try:
        index = IntPrompt.ask("Enter pod number", console=console, choices=choices, show_choices=False)
    except EOFError:
        log.warning("[browser] stdin closed before a pod was picked")
        return None
    return names[index]
