from __future__ import annotations
import json
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .errors import ConfigError
from .utils.path import to_abs_path


@dataclass
class CFG:
    proc_root: str = "/proc"
    table_dir: str = ""                    # "net" for a live /proc: /proc/<pid>/net/tcp
    node_name: Optional[str] = None        # FQDN of this host when unset
    workloads_file: Optional[Path] = None  # static workload list; Kubernetes otherwise
    kubeconfig: Optional[Path] = None
    in_cluster: bool = False
    runtime_timeout: float = 30.0
    include_children: bool = False
    host: str = "0.0.0.0"
    port: int = 8765


PATH_FIELDS = ("workloads_file", "kubeconfig")


def _read_document(p: Path) -> Any:
    txt = p.read_text(encoding="utf-8")
    try:
        if p.suffix in (".yaml", ".yml"):
            return yaml.safe_load(txt)
        return json.loads(txt)
    except (yaml.YAMLError, ValueError) as e:
        raise ConfigError(f"cannot parse {p}: {e}") from e


def apply_overrides(cfg: CFG, data: Dict[str, Any]) -> CFG:
    known = {f.name: f for f in fields(CFG)}
    unknown = sorted(set(data) - set(known))
    if unknown:
        raise ConfigError(f"unknown config keys: {', '.join(unknown)}")
    for k, v in data.items():
        if v is None:
            continue
        if k in PATH_FIELDS:
            v = to_abs_path(v)
        elif k == "port":
            try:
                v = int(v)
            except (TypeError, ValueError):
                raise ConfigError(f"port must be an integer, got {v!r}") from None
        elif k == "runtime_timeout":
            try:
                v = float(v)
            except (TypeError, ValueError):
                raise ConfigError(f"runtime_timeout must be a number, got {v!r}") from None
        setattr(cfg, k, v)
    return cfg


def load_config(path: Optional[str]) -> CFG:
    cfg = CFG()
    if not path:
        return cfg
    p = to_abs_path(path)
    if not p or not p.exists():
        raise ConfigError(f"config not found: {path}")
    data = _read_document(p) or {}
    if not isinstance(data, dict):
        raise ConfigError(f"config {p} must be a mapping")
    return apply_overrides(cfg, data)


def init_cfg_from_args(args) -> CFG:
    cfg = load_config(getattr(args, "config", None))
    overrides = {
        "proc_root": getattr(args, "proc_root", None),
        "table_dir": getattr(args, "table_dir", None),
        "node_name": getattr(args, "node_name", None),
        "workloads_file": getattr(args, "workloads_file", None),
        "kubeconfig": getattr(args, "kubeconfig", None),
        "host": getattr(args, "host", None),
        "port": getattr(args, "port", None),
    }
    # store_true flags only switch things on
    if getattr(args, "in_cluster", False):
        overrides["in_cluster"] = True
    if getattr(args, "include_children", False):
        overrides["include_children"] = True
    cfg = apply_overrides(cfg, overrides)
    if cfg.workloads_file and not cfg.workloads_file.exists():
        print(f"[warn] --workloads-file '{cfg.workloads_file}' not found")
    return cfg
