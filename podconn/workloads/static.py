from __future__ import annotations
import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from ..errors import WorkloadListError
from ..models import ContainerState, Workload
from ..utils.path import to_abs_path


def _container(d: Dict[str, Any]) -> ContainerState:
    return ContainerState(name=str(d.get("name", "")),
                          container_id=str(d.get("id") or d.get("container_id") or ""),
                          running=bool(d.get("running", True)))


def _workload(d: Dict[str, Any]) -> Workload:
    return Workload(name=str(d["name"]),
                    namespace=str(d.get("namespace", "default")),
                    phase=str(d.get("phase", "Running")),
                    containers=[_container(c) for c in (d.get("containers") or [])])


class StaticWorkloadLister:
    """Workloads read from a YAML/JSON file, for hosts without a cluster API.

    - name: web
      namespace: shop
      phase: Running
      node: worker-1          # optional, entry applies to every node if missing
      containers:
        - {name: nginx, id: "docker://3f2a...", running: true}
    """

    def __init__(self, path: str | Path):
        self.path = to_abs_path(path)

    def _load(self) -> List[Dict[str, Any]]:
        p = self.path
        txt = p.read_text(encoding="utf-8")
        data = yaml.safe_load(txt) if p.suffix in (".yaml", ".yml") else json.loads(txt)
        if data is None:
            return []
        if not isinstance(data, list):
            raise ValueError("expected a list of workloads")
        return data

    def list_workloads(self, node_name: str) -> List[Workload]:
        try:
            entries = self._load()
            out: List[Workload] = []
            for d in entries:
                node: Optional[str] = d.get("node")
                if node and node != node_name:
                    continue
                out.append(_workload(d))
        except (OSError, ValueError, KeyError, TypeError, AttributeError, yaml.YAMLError) as e:
            raise WorkloadListError(node_name, e) from e
        return out
