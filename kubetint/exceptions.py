"""
Custom exceptions for Kubetint.

This module defines the exception classes used throughout Kubetint. Errors
are split by how far they reach: configuration and selection errors abort the
whole run, while tail errors stay inside the tailer of the pod that raised
them and never cancel the other pods.

Exception Hierarchy:
- KubetintError: Base exception for all Kubetint-specific errors
  - ConfigurationError: Invalid operator input, fatal before anything starts
    - InvalidPatternError: Invalid regex for pod matching or highlighting
  - KubernetesConnectionError: Kubernetes configuration could not be loaded
  - SelectionError: Listing pods in the namespace failed
  - PodNotFoundError: A requested pod does not exist
  - ClusterRequestError: A request to the Kubernetes API failed (forbidden, server error)
  - TailError: A single pod's log tail failed
    - ConnectError: The log stream could not be opened
    - DecodeError: A log line was not valid UTF-8
    - StreamError: The log stream broke while following
  - RenderError: Writing a line to the terminal failed

Example:
    ```python
    try:
        rule = build_highlight_rule("timeout[")
    except InvalidPatternError as e:
        print(f"Pattern validation failed: {e}")
    ```
"""

from typing import Optional


class KubetintError(Exception):
    """Base exception for Kubetint errors."""
    pass


class ConfigurationError(KubetintError):
    """Raised when there's a configuration issue."""
    pass


class InvalidPatternError(ConfigurationError):
    """Raised when an invalid regex pattern is provided."""
    pass


class KubernetesConnectionError(KubetintError):
    """Raised when unable to connect to Kubernetes cluster."""
    pass


class SelectionError(KubetintError):
    """Raised when the pods of a namespace cannot be listed."""
    pass


class PodNotFoundError(KubetintError):
    """Raised when a requested pod is not found."""
    pass


class ClusterRequestError(KubetintError):
    """Raised when the Kubernetes API rejects or fails a request."""
    pass


class TailError(KubetintError):
    """
    Base class for errors that end a single pod's log tail.

    Attributes:
        pod: Name of the pod whose tail failed
    """

    def __init__(self, pod: str, message: str, cause: Optional[BaseException] = None):
        super().__init__(f"{pod}: {message}")
        self.pod = pod
        self.cause = cause


class ConnectError(TailError):
    """Raised when a pod's log stream cannot be opened."""
    pass


class DecodeError(TailError):
    """Raised when a log line is not valid UTF-8."""
    pass


class StreamError(TailError):
    """Raised when a pod's log stream fails while following."""
    pass


class RenderError(KubetintError):
    """Raised when a line cannot be written to the terminal."""
    pass
