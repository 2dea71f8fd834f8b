"""
Logging setup for Kubetint.

Diagnostics go to stderr through the standard ``logging`` module so they never
mix with the pod log lines written to stdout. The level comes from the
KUBETINT_LOG_LEVEL environment variable (default WARNING) unless the CLI
passes one explicitly.
"""

import logging
import os
from typing import Optional

from .constants import DEFAULT_LOG_LEVEL, ENV_LOG_LEVEL, LOG_FORMAT

log = logging.getLogger('kubetint')


def configure_logging(level: Optional[str] = None) -> None:
    """
    Configure the root logger for the CLI process.

    The first call installs the stderr handler. A later call with an explicit
    level (``--log-level``) only changes the level.
    """
    name = (level or os.getenv(ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL)).upper()
    resolved = getattr(logging, name, logging.WARNING)
    logging.basicConfig(level=resolved, format=LOG_FORMAT)
    if level is not None:
        logging.getLogger().setLevel(resolved)


def log_exception(msg: str, exc: BaseException, level: int = logging.WARNING) -> None:
    """Log an exception with proper formatting."""
    log.log(level, f"{msg}: {exc.__class__.__name__}: {exc}")
