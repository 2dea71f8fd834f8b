"""
Log line classification.

Decides how a log line is rendered. Rules are applied in order and the first
one that applies wins:

1. Filter-only mode: HIGHLIGHTED if the highlight rule matches, otherwise
   SUPPRESSED (the line is not shown at all).
2. The line contains "ERROR", "error" or "Error": ERROR, even when the
   highlight rule matches too.
3. The highlight rule matches: HIGHLIGHTED.
4. Anything else: PLAIN.

Classification is a pure function and can be called from any number of
tailers at once.
"""

from .constants import ERROR_MARKERS
from .models import HighlightRule, RenderCategory


def is_error_line(line: str) -> bool:
    return any(marker in line for marker in ERROR_MARKERS)


def classify(line: str, highlight: HighlightRule, filter_only: bool) -> RenderCategory:
    """
    Classify one decoded log line.

    Args:
        line: Decoded log line
        highlight: Highlight rule of the run
        filter_only: Show only lines matching the highlight rule

    Returns:
        RenderCategory: ERROR, HIGHLIGHTED, PLAIN or SUPPRESSED
    """
    if filter_only:
        if highlight.matches(line):
            return RenderCategory.HIGHLIGHTED
        return RenderCategory.SUPPRESSED

    if is_error_line(line):
        return RenderCategory.ERROR

    if highlight.matches(line):
        return RenderCategory.HIGHLIGHTED

    return RenderCategory.PLAIN
