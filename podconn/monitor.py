"""Attribute the sockets on this node to the pods running here."""
from __future__ import annotations
import logging
from typing import Dict, List, Optional, Protocol, Set, Tuple

from .collectors import collect
from .config import CFG
from .errors import PidResolutionError, ProcessNotReady, WorkloadListError
from .models import Connection, Workload, WorkloadRef
from .utils.net import get_fqdn

ELIGIBLE_PHASES = frozenset({"running", "pending"})


class WorkloadLister(Protocol):
    def list_workloads(self, node_name: str) -> List[Workload]: ...


class PidResolver(Protocol):
    # pids in the host pid namespace; raises PidResolutionError
    def get_pids(self, container_id: str) -> List[int]: ...


class ConnectionGetter(Protocol):
    # pid selects a network namespace; connections and an error can both be returned
    def get_connections(self, pid: int) -> Tuple[List[Connection], Optional[Exception]]: ...


class NodeLogAdapter(logging.LoggerAdapter):
    def process(self, msg, kwargs):
        kwargs.setdefault("extra", {}).update(self.extra)
        return f"[{self.extra['node_name']}] {msg}", kwargs


def running_workloads(workloads: List[Workload]) -> List[Workload]:
    return [w for w in workloads if (w.phase or "").lower() in ELIGIBLE_PHASES]


class Monitor:
    def __init__(self, lister: WorkloadLister, pid_resolver: PidResolver,
                 connection_getter: ConnectionGetter, cfg: Optional[CFG] = None,
                 logger: Optional[logging.Logger] = None):
        cfg = cfg or CFG()
        self.lister = lister
        self.pid_resolver = pid_resolver
        self.connection_getter = connection_getter
        self.node_name = cfg.node_name or get_fqdn()
        # every record names the node it came from
        self.log = NodeLogAdapter(logger or logging.getLogger(__name__),
                                  {"node_name": self.node_name})

    def owner_pids(self, w: Workload) -> Set[int]:
        pids: Set[int] = set()
        for name, cid in w.running_container_ids().items():
            try:
                found = self.pid_resolver.get_pids(cid)
            except ProcessNotReady as e:
                self.log.info("container not ready name=%s namespace=%s container=%s: %s",
                              w.name, w.namespace, name, e)
                continue
            except PidResolutionError as e:
                self.log.warning("failed to get pids name=%s namespace=%s container=%s containerID=%s: %s",
                                 w.name, w.namespace, name, cid, e)
                continue
            except Exception as e:
                # runtime clients and psutil raise their own errors; still only this container is lost
                self.log.warning("failed to get pids name=%s namespace=%s container=%s containerID=%s: %r",
                                 w.name, w.namespace, name, cid, e)
                continue
            pids.update(found)
        return pids

    def collect_workload(self, w: Workload) -> List[Connection]:
        return list(collect(self.owner_pids(w), self.connection_getter, self.log, w).values())

    def collect(self) -> Dict[WorkloadRef, List[Connection]]:
        try:
            workloads = self.lister.list_workloads(self.node_name)
        except WorkloadListError:
            raise
        except Exception as e:
            raise WorkloadListError(self.node_name, e) from e

        out: Dict[WorkloadRef, List[Connection]] = {}
        for w in running_workloads(workloads):
            out[w.ref] = self.collect_workload(w)
        self.log.debug("collected %d workloads on %s", len(out), self.node_name)
        return out
