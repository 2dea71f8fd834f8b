"""
Constants and configuration defaults for Kubetint.

This module contains the configuration constants used throughout the Kubetint
application: log tailing defaults, the color palette for pod labels, line
classification markers and logging defaults.

Constants are organized by category:
- Log tailing: Default backlog size and connect timeout
- Colors: Fixed palette for per-pod labels
- Classification: Substrings that mark a line as an error
- Logging: Default log level and format
- Environment: Variable names read by the CLI
"""

# Log tailing
DEFAULT_NAMESPACE = "default"
DEFAULT_TAIL_LINES = 100
MAX_TAIL_LINES = 100_000
CONNECT_TIMEOUT_SECONDS = 10.0
LOG_STREAM_CHUNK_BYTES = 4096

# Colors (RGB) handed out to pods; draws are independent so two pods may share one
COLOR_PALETTE = (
    (0, 255, 0),
    (128, 128, 0),
    (0, 255, 255),
    (255, 192, 203),
    (245, 120, 250),
    (221, 160, 221),
    (154, 205, 50),
    (230, 230, 120),
)

# Line classification
ERROR_MARKERS = ("ERROR", "error", "Error")
ERROR_STYLE = "bold red"
HIGHLIGHT_STYLE = "bold yellow"

# Logging
DEFAULT_LOG_LEVEL = "WARNING"
LOG_FORMAT = "[%(asctime)s] %(levelname)s %(message)s"

# Environment variables
ENV_NAMESPACE = "KUBETINT_NAMESPACE"
ENV_TAIL_LINES = "KUBETINT_TAIL_LINES"
ENV_LOG_LEVEL = "KUBETINT_LOG_LEVEL"
ENV_CONNECT_TIMEOUT = "KUBETINT_CONNECT_TIMEOUT"
