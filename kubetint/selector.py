"""
Pod selection for Kubetint.

Resolves a namespace and an optional name pattern into the set of pods whose
logs are followed. Matching uses regex search semantics, so ``api`` selects
``payments-api-5f6c`` as well as ``api-gateway-0``.

Key Functions:
- select_pods: Pods of a namespace whose name matches a pattern
- list_pod_names: Sorted pod names of a namespace, for the interactive pick

Example:
    ```python
    pods = await select_pods(cluster, "prod", re.compile("^worker-"))
    if not pods:
        print("no pods matched")
    ```
"""

import logging
from typing import List, Optional, Pattern, Set

from .exceptions import SelectionError
from .kube import ClusterClient

log = logging.getLogger('kubetint')


async def _pod_names(cluster: ClusterClient, namespace: str) -> List[str]:
    try:
        pods = await cluster.list_pods(namespace)
    except Exception as e:
        raise SelectionError(f"Failed to list pods in namespace {namespace!r}: {e}") from e
    return [p.metadata.name for p in pods]


async def select_pods(cluster: ClusterClient, namespace: str, pattern: Optional[Pattern[str]]) -> Set[str]:
    """
    Select the pods of a namespace whose name matches a pattern.

    An empty result is not an error: it means nothing is tailed and the run
    completes as a no-op. Listing is attempted once, without retry.

    Args:
        cluster: Cluster client used to list pods
        namespace: Namespace to list
        pattern: Compiled regex searched in each pod name; None selects every pod

    Returns:
        Set[str]: Names of the matching pods

    Raises:
        SelectionError: If the namespace listing fails
    """
    names = await _pod_names(cluster, namespace)
    if pattern is None:
        selected = set(names)
    else:
        selected = {n for n in names if pattern.search(n)}
    log.info(f"[select] namespace={namespace} listed={len(names)} matched={len(selected)}")
    return selected


async def list_pod_names(cluster: ClusterClient, namespace: str) -> List[str]:
    """
    Sorted pod names of a namespace.

    Raises:
        SelectionError: If the namespace listing fails
    """
    return sorted(await _pod_names(cluster, namespace))
