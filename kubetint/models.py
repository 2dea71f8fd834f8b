"""
Data models for Kubetint.

This module defines the data structures used throughout the Kubetint
application: the values that flow through the log streaming engine, the
per-tailer outcomes reported back to the caller, and the pod representations
shown by the pod browser.

Key Models:
- Color: RGB color drawn from the label palette
- SourceIdentity: Pod name plus its assigned color
- HighlightRule: InactiveHighlight or ActiveHighlight(pattern)
- RenderCategory: How a log line is rendered (or that it is suppressed)
- RenderInstruction: A classified, source-tagged line for the terminal
- TailerState: Lifecycle of a single pod's log tail
- TailOutcome: Terminal state and counters of one tailer
- FanOutResult: Outcomes of every tailer spawned by one run
- ContainerResource, ContainerEnvVar, ContainerInfo, PodInfo: Describe view
- PodSummary: Simplified pod data for the browser table
- LogsConfig: Validated configuration of one logs run

All models use dataclasses. Values handed between concurrent tailers are
frozen so nothing shared can be mutated while streaming.

Example:
    ```python
    source = SourceIdentity(pod_name="api-7d9f-x2k", color=Color(0, 255, 255))
    instruction = RenderInstruction(source, RenderCategory.ERROR, "boom")
    ```
"""

import enum
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Pattern, Union

from .constants import CONNECT_TIMEOUT_SECONDS


@dataclass(frozen=True)
class Color:
    """
    RGB color used for a pod's label.

    Attributes:
        r: Red component (0-255)
        g: Green component (0-255)
        b: Blue component (0-255)
    """
    r: int
    g: int
    b: int

    @property
    def style(self) -> str:
        """Style string understood by rich, e.g. ``rgb(0,255,0)``."""
        return f"rgb({self.r},{self.g},{self.b})"


@dataclass(frozen=True)
class SourceIdentity:
    """
    Visual identity of one log source.

    Created when a tailer is spawned and kept for its whole lifetime.

    Attributes:
        pod_name: Name of the pod the lines come from
        color: Color assigned to the pod's label
    """
    pod_name: str
    color: Color


@dataclass(frozen=True)
class InactiveHighlight:
    """No highlight pattern configured. Never matches anything."""

    @property
    def active(self) -> bool:
        return False

    def matches(self, line: str) -> bool:
        return False


@dataclass(frozen=True)
class ActiveHighlight:
    """
    Highlight pattern configured by the operator.

    Matching uses search semantics, so the pattern may hit anywhere in the line.

    Attributes:
        pattern: Compiled regex
    """
    pattern: Pattern[str]

    @property
    def active(self) -> bool:
        return True

    def matches(self, line: str) -> bool:
        return self.pattern.search(line) is not None


HighlightRule = Union[InactiveHighlight, ActiveHighlight]

NO_HIGHLIGHT = InactiveHighlight()


class RenderCategory(enum.Enum):
    """Rendering decision for one log line."""
    ERROR = "error"
    HIGHLIGHTED = "highlighted"
    PLAIN = "plain"
    SUPPRESSED = "suppressed"


@dataclass(frozen=True)
class RenderInstruction:
    """
    One classified log line ready for the terminal.

    Attributes:
        source: Pod the line came from
        category: ERROR, HIGHLIGHTED or PLAIN (never SUPPRESSED)
        text: Decoded line without its line terminator
    """
    source: SourceIdentity
    category: RenderCategory
    text: str


class TailerState(enum.Enum):
    """Lifecycle of a stream tailer: CONNECTING -> STREAMING -> ENDED | FAILED."""
    CONNECTING = "connecting"
    STREAMING = "streaming"
    ENDED = "ended"
    FAILED = "failed"


@dataclass
class TailOutcome:
    """
    Result of a single tailer once it stopped.

    Attributes:
        pod_name: Pod that was tailed
        state: ENDED or FAILED (or the last state reached if cancelled)
        lines_received: Lines pulled from the log stream
        lines_rendered: Render instructions emitted (suppressed lines excluded)
        error: Failure that ended the tailer, if any
    """
    pod_name: str
    state: TailerState
    lines_received: int = 0
    lines_rendered: int = 0
    error: Optional[Exception] = None


@dataclass
class FanOutResult:
    """
    Outcomes of every tailer spawned by one fan-out run.

    Attributes:
        namespace: Namespace the pods live in
        outcomes: One outcome per spawned tailer, in pod name order
    """
    namespace: str
    outcomes: List[TailOutcome] = field(default_factory=list)

    @property
    def spawned(self) -> int:
        return len(self.outcomes)

    @property
    def empty(self) -> bool:
        """True when no pod was selected and nothing was tailed."""
        return not self.outcomes

    @property
    def failed(self) -> List[TailOutcome]:
        return [o for o in self.outcomes if o.state is TailerState.FAILED]

    @property
    def ended(self) -> List[TailOutcome]:
        return [o for o in self.outcomes if o.state is TailerState.ENDED]


@dataclass
class ContainerResource:
    """
    Container resource requests and limits.

    Attributes:
        requests: Dictionary of resource requests (e.g., {"cpu": "100m", "memory": "128Mi"})
        limits: Dictionary of resource limits (e.g., {"cpu": "200m", "memory": "256Mi"})
    """
    requests: Dict[str, str] = field(default_factory=dict)
    limits: Dict[str, str] = field(default_factory=dict)


@dataclass
class ContainerEnvVar:
    """
    Container environment variable.

    Attributes:
        name: Environment variable name
        value: Display value (secret and configmap references are described, not resolved)
    """
    name: str
    value: Optional[str] = None


@dataclass
class ContainerInfo:
    """
    Complete container information for the describe view.

    Attributes:
        name: Container name
        ready: Whether the container is ready
        restarts: Number of container restarts
        state: Container state (running, waiting(reason), terminated(reason))
        image: Container image name and tag
        env: List of environment variables
        resources: Resource requests and limits
    """
    name: str
    ready: bool
    restarts: int
    state: str
    image: str
    env: List[ContainerEnvVar] = field(default_factory=list)
    resources: ContainerResource = field(default_factory=ContainerResource)


@dataclass
class PodInfo:
    """
    Pod information shown by the describe view.

    Attributes:
        name: Pod name
        uid: Pod unique identifier
        namespace: Kubernetes namespace
        phase: Pod phase (Running, Pending, Failed, etc.)
        node: Node IP where pod is running
        pod_ip: Pod IP address
        age_seconds: Pod age in seconds since creation
        containers: List of container information
    """
    name: str
    uid: str
    namespace: str
    phase: str
    node: Optional[str] = None
    pod_ip: Optional[str] = None
    age_seconds: int = 0
    containers: List[ContainerInfo] = field(default_factory=list)


@dataclass
class PodSummary:
    """
    Simplified pod data for the browser table.

    Attributes:
        name: Pod name
        namespace: Kubernetes namespace
        phase: Pod phase (Running, Pending, Failed, etc.)
        restarts: Total number of container restarts
        ready: Number of ready containers
        total: Total number of containers
    """
    name: str
    namespace: str
    phase: str
    restarts: int
    ready: int
    total: int


@dataclass
class LogsConfig:
    """
    Validated configuration of one ``kubetint logs`` run.

    Exactly one of ``pod`` (single-pod mode) and ``pattern`` (fan-out mode)
    may be set; with neither the operator picks a pod interactively.

    Attributes:
        namespace: Namespace of the pods
        pod: Explicit pod name
        pattern: Compiled regex selecting pods by name
        tail_lines: Backlog lines requested per pod
        highlight: Highlight rule for all tailers
        filter_only: Show only highlighted lines
        kubeconfig: Path to kubeconfig
        context: Kubeconfig context override
        connect_timeout: Seconds allowed to open each log stream
    """
    namespace: str
    tail_lines: int
    highlight: HighlightRule = NO_HIGHLIGHT
    filter_only: bool = False
    pod: Optional[str] = None
    pattern: Optional[Pattern[str]] = None
    kubeconfig: Optional[str] = None
    context: Optional[str] = None
    connect_timeout: float = CONNECT_TIMEOUT_SECONDS

    @property
    def fan_out(self) -> bool:
        """True when pods are selected by pattern and lines carry pod labels."""
        return self.pattern is not None
