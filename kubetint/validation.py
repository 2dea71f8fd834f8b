"""
Input validation and sanitization for Kubetint.

This module provides validation functions for operator input: regex patterns
for pod matching and highlighting, tail lengths, namespaces and pod names. It
runs once at startup, before any log stream is opened, so a bad value never
reaches the streaming engine.

Key Functions:
- validate_regex_pattern: Validates and compiles regex patterns
- build_highlight_rule: Turns an optional highlight pattern into a HighlightRule
- validate_tail_lines: Validates the backlog size requested per pod
- validate_namespace: Validates a namespace name
- validate_pod_name: Validates an explicit pod name
- validate_connect_timeout: Validates the log stream connect timeout
- sanitize_pod_name: Sanitizes pod names for display

All validation functions raise ConfigurationError (or its subclass
InvalidPatternError) with descriptive error messages when validation fails.

Example:
    ```python
    try:
        pattern = validate_regex_pattern("^api-")
        highlight = build_highlight_rule("timeout")
        tail = validate_tail_lines(200)
    except ConfigurationError as e:
        print(f"Validation failed: {e}")
    ```
"""

import re
from typing import Optional

from .constants import MAX_TAIL_LINES
from .exceptions import InvalidPatternError, ConfigurationError
from .models import ActiveHighlight, HighlightRule, NO_HIGHLIGHT

# RFC 1123 label / subdomain, as Kubernetes enforces them for these names
_NAMESPACE_RE = re.compile(r"^[a-z0-9]([-a-z0-9]*[a-z0-9])?$")
_POD_NAME_RE = re.compile(r"^[a-z0-9]([-a-z0-9.]*[a-z0-9])?$")


def validate_regex_pattern(pattern: str) -> re.Pattern:
    """
    Validate and compile a regex pattern for pod name matching.

    The pattern is trimmed of whitespace before validation.

    Args:
        pattern: The regex pattern string to validate and compile

    Returns:
        re.Pattern: Compiled regex pattern ready for use

    Raises:
        InvalidPatternError: If the pattern is empty or invalid regex syntax

    Example:
        ```python
        pattern = validate_regex_pattern("^api-")
        # Use pattern.search(pod_name) to match pod names
        ```
    """
    if not pattern or not pattern.strip():
        raise InvalidPatternError("Pattern cannot be empty")

    try:
        return re.compile(pattern.strip())
    except re.error as e:
        raise InvalidPatternError(f"Invalid regex pattern: {e}")


def build_highlight_rule(pattern: Optional[str]) -> HighlightRule:
    """
    Build the highlight rule for a run from the operator's pattern.

    An absent or blank pattern means "no highlighting" and yields the
    inactive rule, never a pattern that matches everything. Unlike pod
    patterns, surrounding whitespace is kept since it can be meaningful
    inside a log line.

    Args:
        pattern: Highlight regex as typed by the operator, or None

    Returns:
        HighlightRule: NO_HIGHLIGHT or ActiveHighlight with the compiled pattern

    Raises:
        InvalidPatternError: If the pattern is not a valid regex
    """
    if pattern is None or not pattern.strip():
        return NO_HIGHLIGHT

    try:
        return ActiveHighlight(re.compile(pattern))
    except re.error as e:
        raise InvalidPatternError(f"Invalid highlight pattern: {e}")


def validate_tail_lines(tail_lines: int) -> int:
    """
    Validate the number of backlog lines requested from each pod.

    Zero is allowed and means "only new lines".

    Raises:
        ConfigurationError: If tail_lines is not an integer in [0, MAX_TAIL_LINES]
    """
    if isinstance(tail_lines, bool) or not isinstance(tail_lines, int):
        raise ConfigurationError(f"Tail length must be an integer, got: {tail_lines!r}")
    if tail_lines < 0 or tail_lines > MAX_TAIL_LINES:
        raise ConfigurationError(
            f"Tail length must be between 0 and {MAX_TAIL_LINES}, got: {tail_lines}"
        )
    return tail_lines


def validate_namespace(namespace: str) -> str:
    """
    Validate a namespace name.

    Returns:
        str: The trimmed namespace

    Raises:
        ConfigurationError: If the namespace is empty or not a valid DNS label
    """
    if not namespace or not namespace.strip():
        raise ConfigurationError("Namespace cannot be empty")

    namespace = namespace.strip()
    if len(namespace) > 63 or not _NAMESPACE_RE.match(namespace):
        raise ConfigurationError(f"Invalid namespace name: {namespace!r}")
    return namespace


def validate_pod_name(name: str) -> str:
    """
    Validate an explicit pod name given on the command line.

    Returns:
        str: The trimmed pod name

    Raises:
        ConfigurationError: If the name is empty or not a valid DNS subdomain
    """
    if not name or not name.strip():
        raise ConfigurationError("Pod name cannot be empty")

    name = name.strip()
    if len(name) > 253 or not _POD_NAME_RE.match(name):
        raise ConfigurationError(f"Invalid pod name: {name!r}")
    return name


def sanitize_pod_name(name: str) -> str:
    """Trim a pod name and cap it at the DNS name length limit for display."""
    if not name:
        return ""

    return name.strip()[:253]  # DNS name length limit


def validate_connect_timeout(timeout: float) -> float:
    """
    Validate the timeout for opening a log stream.

    Raises:
        ConfigurationError: If timeout is not a positive number
    """
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
        raise ConfigurationError(f"Connect timeout must be a positive number, got: {timeout!r}")
    return float(timeout)
