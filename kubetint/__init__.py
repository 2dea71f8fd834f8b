"""
Kubetint - Colorized multi-pod Kubernetes log tailing.

Kubetint discovers pods in a namespace, optionally filters them with a regex,
and follows their logs concurrently in a single terminal. Every pod gets its
own color, error lines are shown in bold red and lines matching a highlight
pattern in bold yellow. A small interactive browser lists pods and shows a
describe view for one of them.

Key Features:
- Concurrent log following for every pod matching a regex
- Per-pod color labels so interleaved output stays readable
- Highlight pattern for interesting lines, or filter mode to show only them
- Interactive pod pick when no pod or pattern is given
- Terminal pod browser with a describe view

Example:
    Follow every pod whose name contains ``api``:
    ```bash
    kubetint logs -n prod --pattern api
    ```

    Follow one pod and highlight request ids:
    ```bash
    kubetint logs -n prod --pod api-7d9f-x2k --highlight 'req-[0-9a-f]+'
    ```

    Show only matching lines across pods:
    ```bash
    kubetint logs -n prod --pattern '^worker-' --highlight timeout --filter
    ```

    Browse pods:
    ```bash
    kubetint ui -n prod
    ```
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
