"""
Terminal output for log lines.

The TerminalRenderer is the single writer shared by every tailer. Each
render instruction becomes one rich Text (optional pod label, styled line)
that is printed in one call while holding a lock, so lines from different
pods never split each other and styles are reset at the end of every line.

Style rules:
- ERROR: bold red
- HIGHLIGHTED: bold yellow
- PLAIN: the pod's color when labels are shown (multi-pod mode), no style
  otherwise (single-pod mode)
"""

import threading
from typing import Optional

from rich.console import Console
from rich.text import Text

from .constants import ERROR_STYLE, HIGHLIGHT_STYLE
from .exceptions import RenderError
from .logging_utils import log_exception
from .models import RenderCategory, RenderInstruction


class TerminalRenderer:
    """
    Serializes render instructions to the terminal.

    Args:
        console: rich Console to write to (stdout by default)
        show_source: Prefix each line with the pod name in the pod's color

    Attributes:
        rendered: Lines written successfully
        failed_writes: Lines lost because the write failed
    """

    def __init__(self, console: Optional[Console] = None, show_source: bool = True):
        self.console = console or Console(highlight=False, soft_wrap=True)
        self.show_source = show_source
        self.rendered = 0
        self.failed_writes = 0
        self._lock = threading.Lock()

    def style_for(self, instruction: RenderInstruction) -> Optional[str]:
        category = instruction.category
        if category is RenderCategory.ERROR:
            return ERROR_STYLE
        if category is RenderCategory.HIGHLIGHTED:
            return HIGHLIGHT_STYLE
        if category is RenderCategory.PLAIN:
            return instruction.source.color.style if self.show_source else None
        raise ValueError(f"{category} lines are never rendered")

    def format(self, instruction: RenderInstruction) -> Text:
        """Build the styled line for an instruction."""
        line = Text(no_wrap=True, end="\n")
        if self.show_source:
            line.append(instruction.source.pod_name, style=instruction.source.color.style)
            line.append(" ")
        line.append(instruction.text, style=self.style_for(instruction))
        return line

    def render(self, instruction: RenderInstruction) -> None:
        """
        Write one instruction as a whole line.

        Safe to call from several tailers at once. A failed write (broken
        pipe, or a character the output encoding cannot represent) is logged
        and counted; it is not raised so the other pods keep streaming.
        """
        line = self.format(instruction)
        with self._lock:
            try:
                # render to a string first so a failed write leaves nothing
                # queued in the console for the next line
                with self.console.capture() as capture:
                    self.console.print(line, soft_wrap=True, highlight=False)
                out = self.console.file
                out.write(capture.get())
                out.flush()
            except (OSError, ValueError) as e:
                self.failed_writes += 1
                err = RenderError(f"write failed for {instruction.source.pod_name}: {e}")
                log_exception("[render] dropped line", err)
                return
            self.rendered += 1
