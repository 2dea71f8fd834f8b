"""
Pod data processing and transformation utilities.

This module converts Kubernetes pod objects into the models shown by the pod
browser: a one-row summary for the pod table and a full PodInfo for the
describe view. It handles environment variable extraction, resource parsing
and container state processing.

Key Functions:
- extract_container_env_vars: Extract and format environment variables
- extract_container_resources: Parse resource requests and limits
- get_container_state: Determine container state from status
- pod_to_view: Convert Kubernetes pod object to PodInfo
- pod_to_summary: Convert Kubernetes pod object to PodSummary

The module tolerates partially populated pods (pending pods have no container
statuses yet, for example).

Example:
    ```python
    info = pod_to_view(k8s_pod_object)
    print(f"Pod {info.name} has {len(info.containers)} containers")
    ```
"""

import time
from typing import Any, List, Optional

from .models import ContainerEnvVar, ContainerInfo, ContainerResource, PodInfo, PodSummary


def extract_container_env_vars(container_spec: Any) -> List[ContainerEnvVar]:
    """Extract environment variables from container spec."""
    env_list = []
    if not container_spec or not getattr(container_spec, 'env', None):
        return env_list

    for ev in container_spec.env:
        val_display = None
        if ev.value is not None:
            val_display = ev.value
        elif ev.value_from:
            src = ev.value_from
            if getattr(src, 'secret_key_ref', None):
                ref = src.secret_key_ref
                val_display = f"*** (secret {ref.name}/{ref.key})"
            elif getattr(src, 'config_map_key_ref', None):
                ref = src.config_map_key_ref
                val_display = f"configmap:{ref.name}/{ref.key}"
            elif getattr(src, 'field_ref', None):
                val_display = f"fieldRef:{src.field_ref.field_path}"
            elif getattr(src, 'resource_field_ref', None):
                val_display = f"resourceField:{src.resource_field_ref.resource}"
            else:
                val_display = '(valueFrom)'
        env_list.append(ContainerEnvVar(name=ev.name, value=val_display))

    return env_list


def extract_container_resources(container_spec: Any) -> ContainerResource:
    """Extract cpu/memory requests and limits from container spec."""
    resources = ContainerResource()
    spec_resources = getattr(container_spec, 'resources', None) if container_spec else None
    if not spec_resources:
        return resources

    rq = getattr(spec_resources, 'requests', None) or {}
    lm = getattr(spec_resources, 'limits', None) or {}
    for k in ('cpu', 'memory'):
        if rq.get(k):
            resources.requests[k] = rq.get(k)
        if lm.get(k):
            resources.limits[k] = lm.get(k)

    return resources


def get_container_state(container_status: Any) -> str:
    """Get container state as a string."""
    state = container_status.state
    if state is None:
        return 'unknown'
    if state.running:
        return 'running'
    elif state.waiting:
        return f"waiting({state.waiting.reason})"
    elif state.terminated:
        return f"terminated({state.terminated.reason})"
    else:
        return 'unknown'


def _age_seconds(p: Any, now: Optional[float] = None) -> int:
    created = getattr(p.metadata, 'creation_timestamp', None)
    if not created:
        return 0
    now = time.time() if now is None else now
    return max(0, int(now - created.timestamp()))


def pod_to_view(p: Any, now: Optional[float] = None) -> PodInfo:
    """Convert Kubernetes pod object to PodInfo for the describe view."""
    status = p.status
    spec_map = {sc.name: sc for sc in (getattr(p.spec, 'containers', None) or [])}

    containers = []
    for cstat in (status.container_statuses if status else None) or []:
        container_spec = spec_map.get(cstat.name)
        containers.append(ContainerInfo(
            name=cstat.name,
            ready=bool(cstat.ready),
            restarts=cstat.restart_count or 0,
            state=get_container_state(cstat),
            image=cstat.image,
            env=extract_container_env_vars(container_spec),
            resources=extract_container_resources(container_spec),
        ))

    return PodInfo(
        name=p.metadata.name,
        uid=p.metadata.uid,
        namespace=p.metadata.namespace,
        phase=(status.phase if status else None) or 'Unknown',
        node=status.host_ip if status else None,
        pod_ip=getattr(status, 'pod_ip', None),
        age_seconds=_age_seconds(p, now),
        containers=containers,
    )


def pod_to_summary(p: Any) -> PodSummary:
    """Convert Kubernetes pod object to a PodSummary table row."""
    status = p.status
    statuses = (status.container_statuses if status else None) or []
    return PodSummary(
        name=p.metadata.name,
        namespace=p.metadata.namespace,
        phase=(status.phase if status else None) or 'Unknown',
        restarts=sum(c.restart_count or 0 for c in statuses),
        ready=sum(1 for c in statuses if c.ready),
        total=len(statuses),
    )
