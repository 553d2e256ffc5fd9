from __future__ import annotations
from ..config import CFG
from .static import StaticWorkloadLister


def make_lister(cfg: CFG):
    if cfg.workloads_file:
        return StaticWorkloadLister(cfg.workloads_file)
    # only pull in the cluster client when it is actually used
    from .kubernetes import KubernetesPodLister
    return KubernetesPodLister(kubeconfig=cfg.kubeconfig, in_cluster=cfg.in_cluster)


__all__ = ["StaticWorkloadLister", "make_lister"]
