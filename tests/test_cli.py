"""Tests for the command-line interface."""

import logging
import re

import pytest
from rich.prompt import IntPrompt

from conftest import FakeCluster, FakeLogStream, make_pod, output_of
from kubetint import cli
from kubetint.exceptions import ConfigurationError, InvalidPatternError, SelectionError
from kubetint.logging_utils import configure_logging
from kubetint.models import LogsConfig, NO_HIGHLIGHT


def parse(*argv: str):
    return cli.build_parser().parse_args(list(argv))


class TestParser:

    def test_logs_defaults(self, monkeypatch) -> None:
        monkeypatch.delenv("KUBETINT_NAMESPACE", raising=False)
        monkeypatch.delenv("KUBETINT_TAIL_LINES", raising=False)
        args = parse("logs")
        assert args.command == "logs"
        assert args.namespace == "default"
        assert args.tail_length == 100
        assert args.pod is None and args.pattern is None
        assert args.filter is False

    def test_environment_defaults(self, monkeypatch) -> None:
        monkeypatch.setenv("KUBETINT_NAMESPACE", "prod")
        monkeypatch.setenv("KUBETINT_TAIL_LINES", "25")
        args = parse("logs")
        assert args.namespace == "prod"
        assert args.tail_length == 25

    def test_malformed_environment_falls_back(self, monkeypatch) -> None:
        monkeypatch.setenv("KUBETINT_TAIL_LINES", "lots")
        assert parse("logs").tail_length == 100

    def test_short_flags(self) -> None:
        args = parse("logs", "-n", "prod", "-p", "^api-", "-t", "5", "-r", "timeout", "--filter")
        assert (args.namespace, args.pattern, args.tail_length, args.highlight, args.filter) == (
            "prod", "^api-", 5, "timeout", True,
        )

    def test_pod_and_pattern_are_exclusive(self) -> None:
        with pytest.raises(SystemExit):
            parse("logs", "--pod", "api-0", "--pattern", "api")

    def test_ui_command(self) -> None:
        args = parse("ui", "-n", "prod")
        assert (args.command, args.namespace) == ("ui", "prod")


class TestLogsConfig:

    def test_fan_out_config(self) -> None:
        cfg = cli.build_logs_config(parse("logs", "-p", "^api-", "-r", "req-\\d+"))
        assert cfg.fan_out
        assert cfg.pattern.pattern == "^api-"
        assert cfg.highlight.active

    def test_single_pod_config(self) -> None:
        cfg = cli.build_logs_config(parse("logs", "--pod", "api-0"))
        assert not cfg.fan_out
        assert cfg.pod == "api-0"
        assert cfg.highlight is NO_HIGHLIGHT

    def test_filter_requires_highlight(self) -> None:
        with pytest.raises(ConfigurationError):
            cli.build_logs_config(parse("logs", "-p", "api", "--filter"))

    def test_invalid_highlight(self) -> None:
        with pytest.raises(InvalidPatternError):
            cli.build_logs_config(parse("logs", "-p", "api", "-r", "[oops"))

    def test_negative_tail(self) -> None:
        with pytest.raises(ConfigurationError):
            cli.build_logs_config(parse("logs", "-p", "api", "-t", "-3"))


class TestRunLogs:

    @pytest.mark.asyncio
    async def test_pattern_mode_labels_lines(self, plain_console) -> None:
        cluster = FakeCluster(
            pods=[make_pod("api-0"), make_pod("db-0")],
            streams={"api-0": FakeLogStream([b"up"]), "db-0": FakeLogStream([b"never"])},
        )
        cfg = LogsConfig(namespace="default", tail_lines=10, pattern=re.compile("api"))

        result = await cli.run_logs(cfg, cluster=cluster, console=plain_console)

        assert [o.pod_name for o in result.outcomes] == ["api-0"]
        assert output_of(plain_console) == "api-0 up\n"

    @pytest.mark.asyncio
    async def test_pattern_without_match_is_a_no_op(self, plain_console, caplog) -> None:
        cluster = FakeCluster(pods=[make_pod("api-0")])
        cfg = LogsConfig(namespace="default", tail_lines=10, pattern=re.compile("^db-"))

        result = await cli.run_logs(cfg, cluster=cluster, console=plain_console)

        assert result.empty
        assert cluster.opened == []
        assert "No pods matched" in caplog.text

    @pytest.mark.asyncio
    async def test_single_pod_mode_has_no_labels(self, plain_console) -> None:
        cluster = FakeCluster(streams={"api-0": FakeLogStream([b"line one", b"line two"])})
        cfg = LogsConfig(namespace="default", tail_lines=10, pod="api-0")

        await cli.run_logs(cfg, cluster=cluster, console=plain_console)

        assert output_of(plain_console) == "line one\nline two\n"

    @pytest.mark.asyncio
    async def test_interactive_pick(self, monkeypatch, plain_console) -> None:
        monkeypatch.setattr(cli, "choose_pod", lambda names, console: names[-1])
        cluster = FakeCluster(
            pods=[make_pod("api-0"), make_pod("worker-1")],
            streams={"worker-1": FakeLogStream([b"working"])},
        )
        cfg = LogsConfig(namespace="default", tail_lines=10)

        result = await cli.run_logs(cfg, cluster=cluster, console=plain_console)

        assert [o.pod_name for o in result.outcomes] == ["worker-1"]
        assert output_of(plain_console) == "working\n"

    @pytest.mark.asyncio
    async def test_interactive_pick_with_closed_stdin_tails_nothing(self, monkeypatch, plain_console) -> None:
        def closed(cls, *args, **kwargs):
            raise EOFError

        monkeypatch.setattr(IntPrompt, "ask", classmethod(closed))
        cluster = FakeCluster(pods=[make_pod("api-0")], streams={"api-0": FakeLogStream([b"never"])})
        cfg = LogsConfig(namespace="default", tail_lines=10)

        result = await cli.run_logs(cfg, cluster=cluster, console=plain_console)

        assert result.empty
        assert cluster.opened == []

    @pytest.mark.asyncio
    async def test_selection_failure_propagates(self, plain_console) -> None:
        cluster = FakeCluster(list_error=OSError("connection refused"))
        cfg = LogsConfig(namespace="default", tail_lines=10, pattern=re.compile("api"))

        with pytest.raises(SelectionError):
            await cli.run_logs(cfg, cluster=cluster, console=plain_console)


class TestMain:

    def test_configuration_error_exits_2(self, capsys) -> None:
        with pytest.raises(SystemExit) as exc:
            cli.main(["logs", "-p", "api", "-r", "(bad"])
        assert exc.value.code == 2
        assert "Configuration error" in capsys.readouterr().err

    def test_selection_error_exits_1(self, monkeypatch, capsys) -> None:
        async def failing(cfg):
            raise SelectionError("Failed to list pods")

        monkeypatch.setattr(cli, "run_logs", failing)
        with pytest.raises(SystemExit) as exc:
            cli.main(["logs", "-p", "api"])
        assert exc.value.code == 1
        assert "Failed to list pods" in capsys.readouterr().err

    def test_unexpected_error_exits_1(self, monkeypatch, capsys) -> None:
        async def failing(cfg):
            raise RuntimeError("event loop exploded")

        monkeypatch.setattr(cli, "run_logs", failing)
        with pytest.raises(SystemExit) as exc:
            cli.main(["logs", "-p", "api"])
        assert exc.value.code == 1
        assert "event loop exploded" in capsys.readouterr().err

    def test_logging_is_configured_before_env_defaults_are_read(self, monkeypatch) -> None:
        calls = []
        build = cli.build_parser

        def parser():
            calls.append(("parse", None))
            return build()

        monkeypatch.setattr(cli, "configure_logging", lambda level=None: calls.append(("configure", level)))
        monkeypatch.setattr(cli, "build_parser", parser)

        with pytest.raises(SystemExit):
            cli.main(["--log-level", "debug", "logs", "-p", "api", "-r", "(bad"])

        assert calls == [("configure", None), ("parse", None), ("configure", "debug")]

    def test_malformed_environment_warning_is_logged(self, monkeypatch, caplog) -> None:
        monkeypatch.setenv("KUBETINT_TAIL_LINES", "lots")
        with caplog.at_level(logging.WARNING, logger="kubetint"):
            with pytest.raises(SystemExit):
                cli.main(["logs", "-p", "api", "-r", "(bad"])
        assert "Invalid KUBETINT_TAIL_LINES" in caplog.text


def test_explicit_log_level_overrides_earlier_setup() -> None:
    root = logging.getLogger()
    previous = root.level
    try:
        configure_logging()
        configure_logging("debug")
        assert root.level == logging.DEBUG
    finally:
        root.setLevel(previous)
