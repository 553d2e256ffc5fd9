from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, NamedTuple

NONE_STATUS = "NONE"


class WorkloadKey(NamedTuple):
    # status is left out: it changes over a connection's lifetime
    family: str
    kind: str
    local_address: str
    remote_address: str


@dataclass(frozen=True)
class Connection:
    family: str          # 'inet'
    kind: str            # 'tcp' | 'udp'
    local_address: str   # 'ip:port'
    remote_address: str
    status: str = NONE_STATUS  # 'ESTABLISHED', 'LISTEN', ..., 'NONE'

    def __post_init__(self):
        if not self.status:
            object.__setattr__(self, "status", NONE_STATUS)

    @property
    def key(self) -> WorkloadKey:
        return WorkloadKey(self.family, self.kind, self.local_address, self.remote_address)


# one per collect() call, keyed by WorkloadKey; last write wins
ConnectionSet = Dict[WorkloadKey, Connection]


class WorkloadRef(NamedTuple):
    name: str
    namespace: str


@dataclass
class ContainerState:
    name: str
    container_id: str = ""   # 'docker://<id>', 'containerd://<id>', ...
    running: bool = False


@dataclass
class Workload:
    name: str
    namespace: str
    phase: str = "Unknown"
    containers: List[ContainerState] = field(default_factory=list)

    @property
    def ref(self) -> WorkloadRef:
        return WorkloadRef(self.name, self.namespace)

    def running_container_ids(self) -> Dict[str, str]:
        # init containers are not considered
        return {c.name: c.container_id for c in self.containers if c.running and c.container_id}
