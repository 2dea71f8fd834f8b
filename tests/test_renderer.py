"""Tests for terminal rendering."""

import threading

import pytest

from conftest import output_of
from kubetint.models import Color, RenderCategory, RenderInstruction, SourceIdentity
from kubetint.renderer import TerminalRenderer

SOURCE = SourceIdentity("api-0", Color(0, 255, 0))


def instruction(category: RenderCategory, text: str = "hello", source: SourceIdentity = SOURCE) -> RenderInstruction:
    return RenderInstruction(source, category, text)


class TestStyles:

    def test_error_is_bold_red(self) -> None:
        assert TerminalRenderer().style_for(instruction(RenderCategory.ERROR)) == "bold red"

    def test_highlight_is_bold_yellow(self) -> None:
        assert TerminalRenderer().style_for(instruction(RenderCategory.HIGHLIGHTED)) == "bold yellow"

    def test_plain_uses_pod_color_with_labels(self) -> None:
        assert TerminalRenderer(show_source=True).style_for(instruction(RenderCategory.PLAIN)) == "rgb(0,255,0)"

    def test_plain_is_unstyled_for_single_pod(self) -> None:
        assert TerminalRenderer(show_source=False).style_for(instruction(RenderCategory.PLAIN)) is None

    def test_suppressed_is_refused(self) -> None:
        with pytest.raises(ValueError):
            TerminalRenderer().render(instruction(RenderCategory.SUPPRESSED))


def test_label_prefixes_line(plain_console) -> None:
    renderer = TerminalRenderer(plain_console, show_source=True)
    renderer.render(instruction(RenderCategory.PLAIN, "GET /health 200"))
    assert output_of(plain_console) == "api-0 GET /health 200\n"


def test_single_pod_mode_has_no_label(plain_console) -> None:
    renderer = TerminalRenderer(plain_console, show_source=False)
    renderer.render(instruction(RenderCategory.PLAIN, "GET /health 200"))
    assert output_of(plain_console) == "GET /health 200\n"


def test_markup_in_log_lines_is_printed_verbatim(plain_console) -> None:
    renderer = TerminalRenderer(plain_console, show_source=False)
    renderer.render(instruction(RenderCategory.PLAIN, "[bold]not markup[/bold] :smile:"))
    assert output_of(plain_console) == "[bold]not markup[/bold] :smile:\n"


def test_ansi_output_is_styled_and_reset(ansi_console) -> None:
    renderer = TerminalRenderer(ansi_console, show_source=True)
    renderer.render(instruction(RenderCategory.ERROR, "Error: boom"))
    out = output_of(ansi_console)
    assert "\x1b[38;2;0;255;0mapi-0" in out
    assert "\x1b[1;31mError: boom" in out
    assert out.endswith("\x1b[0m\n")


def test_concurrent_renders_never_split_lines(plain_console) -> None:
    renderer = TerminalRenderer(plain_console, show_source=True)
    sources = [SourceIdentity(f"pod-{n}", Color(n, n, n)) for n in range(8)]

    def worker(source: SourceIdentity) -> None:
        for i in range(200):
            renderer.render(instruction(RenderCategory.PLAIN, f"{source.pod_name} message {i}", source))

    threads = [threading.Thread(target=worker, args=(s,)) for s in sources]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    lines = output_of(plain_console).splitlines()
    assert len(lines) == 8 * 200
    for source in sources:
        mine = [l for l in lines if l.startswith(source.pod_name + " ")]
        assert mine == [f"{source.pod_name} {source.pod_name} message {i}" for i in range(200)]
    assert renderer.rendered == 8 * 200


class BrokenFile:
    def write(self, data: str) -> int:
        raise OSError("broken pipe")

    def flush(self) -> None:
        raise OSError("broken pipe")


def test_write_failure_is_counted_not_raised() -> None:
    from rich.console import Console

    renderer = TerminalRenderer(Console(file=BrokenFile(), color_system=None), show_source=False)
    renderer.render(instruction(RenderCategory.PLAIN))
    renderer.render(instruction(RenderCategory.ERROR))
    assert renderer.failed_writes == 2
    assert renderer.rendered == 0


def test_unencodable_line_is_dropped_and_next_line_written() -> None:
    import io

    from rich.console import Console

    out = io.TextIOWrapper(io.BytesIO(), encoding="ascii")
    renderer = TerminalRenderer(Console(file=out, color_system=None, width=200), show_source=False)
    renderer.render(instruction(RenderCategory.PLAIN, "café opened"))
    renderer.render(instruction(RenderCategory.PLAIN, "cafe opened"))

    assert renderer.failed_writes == 1
    assert renderer.rendered == 1
    out.flush()
    assert out.buffer.getvalue() == b"cafe opened\n"
