from __future__ import annotations
import logging
from pathlib import Path
from typing import List, Optional

from kubernetes.client import ApiClient, Configuration, CoreV1Api, V1Pod
from kubernetes.client.rest import ApiException
from kubernetes.config import ConfigException, load_incluster_config, load_kube_config
from urllib3.exceptions import HTTPError

from ..errors import ConfigError, WorkloadListError
from ..models import ContainerState, Workload

log = logging.getLogger(__name__)


def make_core_api(kubeconfig: Optional[Path] = None, in_cluster: bool = False) -> CoreV1Api:
    try:
        if in_cluster:
            load_incluster_config()
        else:
            load_kube_config(config_file=str(kubeconfig) if kubeconfig else None)
    except ConfigException as e:
        raise ConfigError(f"cannot load kubernetes configuration: {e}") from e
    c = Configuration.get_default_copy()
    return CoreV1Api(ApiClient(configuration=c))


def pod_to_workload(pod: V1Pod) -> Workload:
    meta = pod.metadata
    status = pod.status
    containers: List[ContainerState] = []
    for cs in (status.container_statuses or []) if status else []:
        running = bool(cs.state and cs.state.running is not None)
        containers.append(ContainerState(name=cs.name, container_id=cs.container_id or "",
                                         running=running))
    return Workload(name=meta.name, namespace=meta.namespace,
                    phase=(status.phase if status and status.phase else "Unknown"),
                    containers=containers)


class KubernetesPodLister:
    def __init__(self, api: Optional[CoreV1Api] = None, kubeconfig: Optional[Path] = None,
                 in_cluster: bool = False):
        self.api = api or make_core_api(kubeconfig, in_cluster)

    def list_workloads(self, node_name: str) -> List[Workload]:
        try:
            pods = self.api.list_pod_for_all_namespaces(field_selector=f"spec.nodeName={node_name}")
        except (ApiException, HTTPError, OSError) as e:
            raise WorkloadListError(node_name, e) from e
        out = [pod_to_workload(p) for p in (pods.items or [])]
        log.debug("node %s: %d pods", node_name, len(out))
        return out
