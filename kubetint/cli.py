"""
Command-line interface for Kubetint.

This module provides the command-line interface for Kubetint, handling
argument parsing, input validation and dispatch to the log tailing and pod
browser commands.

Key Functions:
- build_parser: Create and configure the argument parser
- build_logs_config: Validate ``logs`` arguments into a LogsConfig
- run_logs: Resolve pods and follow their logs
- run_ui: Start the pod browser
- main: Main entry point for the CLI application

The ``logs`` command has three modes: an explicit pod name (single pod, no
labels), a name pattern (every matching pod, labelled and colored) and,
with neither, an interactive numbered pick.

Example:
    ```bash
    kubetint logs -n prod --pattern '^api-' --highlight 'status=5\\d\\d'
    kubetint logs -n prod --pod api-7d9f-x2k -t 500
    kubetint ui -n prod
    ```
"""

import argparse
import asyncio
import logging
import os
import sys
from typing import Optional

from rich.console import Console

from . import __version__
from .browser import PodBrowser, choose_pod, prompt_in_thread
from .constants import (
    CONNECT_TIMEOUT_SECONDS, DEFAULT_NAMESPACE, DEFAULT_TAIL_LINES,
    ENV_CONNECT_TIMEOUT, ENV_NAMESPACE, ENV_TAIL_LINES,
)
from .exceptions import ConfigurationError, KubetintError
from .fanout import FanOutCoordinator
from .kube import ClusterClient, current_context, load_kube
from .logging_utils import configure_logging
from .models import FanOutResult, LogsConfig
from .renderer import TerminalRenderer
from .selector import list_pod_names, select_pods
from .validation import (
    build_highlight_rule, validate_connect_timeout, validate_namespace,
    validate_pod_name, validate_regex_pattern, validate_tail_lines,
)

log = logging.getLogger('kubetint')


def _env_number(name: str, default, cast):
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return cast(raw)
    except ValueError:
        log.warning(f"[config] Invalid {name}={raw!r}, using default: {default}")
        return default


def _add_cluster_args(p: argparse.ArgumentParser, env_namespace: str) -> None:
    p.add_argument("-n", "--namespace", default=env_namespace, help="Namespace of the pods (env: KUBETINT_NAMESPACE)")
    p.add_argument("--kubeconfig", default=None, help="Path to kubeconfig (defaults to kube rules)")
    p.add_argument("--context", default=None, help="Kubecontext override")


def build_parser() -> argparse.ArgumentParser:
    """
    Build and configure the command-line argument parser.

    Environment variables are used as defaults where appropriate.

    Returns:
        argparse.ArgumentParser: Configured argument parser with all options

    Environment Variables:
        KUBETINT_NAMESPACE: Default namespace (default: default)
        KUBETINT_TAIL_LINES: Default backlog lines per pod (default: 100)
        KUBETINT_CONNECT_TIMEOUT: Seconds to open a log stream (default: 10)
        KUBETINT_LOG_LEVEL: Diagnostics level on stderr (default: WARNING)
    """
    env_namespace = os.getenv(ENV_NAMESPACE, DEFAULT_NAMESPACE)
    env_tail = _env_number(ENV_TAIL_LINES, DEFAULT_TAIL_LINES, int)
    env_timeout = _env_number(ENV_CONNECT_TIMEOUT, CONNECT_TIMEOUT_SECONDS, float)

    p = argparse.ArgumentParser("kubetint", description="Colorized multi-pod Kubernetes log tailing")
    p.add_argument("--version", action="version", version=f"kubetint {__version__}")
    p.add_argument("--log-level", default=None, help="Diagnostics level on stderr (env: KUBETINT_LOG_LEVEL)")
    sub = p.add_subparsers(dest="command", required=True)

    logs = sub.add_parser("logs", help="Follow pod logs")
    _add_cluster_args(logs, env_namespace)
    target = logs.add_mutually_exclusive_group()
    target.add_argument("--pod", help="Follow a single pod by name")
    target.add_argument("-p", "--pattern", help="Follow every pod whose name matches this regex")
    logs.add_argument("-t", "--tail-length", type=int, default=env_tail,
                      help="Backlog lines per pod (env: KUBETINT_TAIL_LINES)")
    logs.add_argument("-r", "--highlight", default=None, help="Regex; matching lines are shown in bold yellow")
    logs.add_argument("--filter", action="store_true", help="Show only lines matching --highlight")
    logs.add_argument("--connect-timeout", type=float, default=env_timeout,
                      help="Seconds to open each log stream (env: KUBETINT_CONNECT_TIMEOUT)")

    ui = sub.add_parser("ui", help="Browse pods interactively")
    _add_cluster_args(ui, env_namespace)
    return p


def build_logs_config(args: argparse.Namespace) -> LogsConfig:
    """
    Validate ``logs`` arguments.

    Raises:
        ConfigurationError: On any invalid value, before anything connects
    """
    highlight = build_highlight_rule(args.highlight)
    if args.filter and not highlight.active:
        raise ConfigurationError("--filter requires a non-empty --highlight pattern")

    return LogsConfig(
        namespace=validate_namespace(args.namespace),
        pod=validate_pod_name(args.pod) if args.pod else None,
        pattern=validate_regex_pattern(args.pattern) if args.pattern else None,
        tail_lines=validate_tail_lines(args.tail_length),
        highlight=highlight,
        filter_only=args.filter,
        kubeconfig=args.kubeconfig,
        context=args.context,
        connect_timeout=validate_connect_timeout(args.connect_timeout),
    )


async def run_logs(
    cfg: LogsConfig,
    cluster: Optional[ClusterClient] = None,
    console: Optional[Console] = None,
) -> FanOutResult:
    """
    Resolve the pods to follow and stream their logs until every stream stops.

    Raises:
        KubernetesConnectionError: If the cluster configuration cannot be loaded
        SelectionError: If the namespace listing fails
    """
    if cluster is None:
        cluster = await load_kube(cfg.kubeconfig, cfg.context, connect_timeout=cfg.connect_timeout)

    if cfg.pod:
        names = {cfg.pod}
    elif cfg.pattern is not None:
        names = await select_pods(cluster, cfg.namespace, cfg.pattern)
        if not names:
            log.warning(f"No pods matched pattern {cfg.pattern.pattern!r} in namespace {cfg.namespace}")
    else:
        candidates = await list_pod_names(cluster, cfg.namespace)
        if not candidates:
            log.warning(f"No pods found in namespace {cfg.namespace}")
        chosen = await prompt_in_thread(lambda: choose_pod(candidates, console))
        names = {chosen} if chosen else set()

    renderer = TerminalRenderer(console, show_source=cfg.fan_out)
    coordinator = FanOutCoordinator(cluster, renderer)
    return await coordinator.run(cfg.namespace, names, cfg.tail_lines, cfg.highlight, cfg.filter_only)


async def run_ui(namespace: str, kubeconfig: Optional[str], context: Optional[str]) -> None:
    cluster = await load_kube(kubeconfig, context)
    browser = PodBrowser(cluster, namespace, context_name=current_context(kubeconfig, context))
    await browser.run()


def main(argv=None) -> None:
    """
    Main entry point for the Kubetint CLI application.

    Raises:
        SystemExit: On configuration errors (exit code 2), on cluster or
            selection errors and when every tailed pod failed (exit code 1)
    """
    # env defaults are read while building the parser and may warn
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.log_level:
        configure_logging(args.log_level)

    try:
        if args.command == 'logs':
            cfg = build_logs_config(args)
        else:
            namespace = validate_namespace(args.namespace)
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(2)

    try:
        if args.command == 'logs':
            result = asyncio.run(run_logs(cfg))
            if result.spawned and len(result.failed) == result.spawned:
                print(f"All {result.spawned} log stream(s) failed", file=sys.stderr)
                sys.exit(1)
        else:
            asyncio.run(run_ui(namespace, args.kubeconfig, args.context))
    except KeyboardInterrupt:
        print("\nShutting down...", file=sys.stderr)
    except KubetintError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"Unexpected error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":  # pragma: no cover
    main()
