"""Resolve container IDs, as reported in pod status, to host PIDs."""
from __future__ import annotations
import json
import logging
import subprocess
from typing import Dict, List, Optional

import psutil

from .errors import PidResolutionError, ProcessNotReady

log = logging.getLogger(__name__)

DOCKER_PREFIX = "docker://"
CRI_PREFIXES = ("containerd://", "cri-o://")


def strip_prefix(container_id: str, prefix: str) -> str:
    if not container_id.startswith(prefix):
        raise PidResolutionError(container_id, f"not a {prefix[:-3]} container ID")
    return container_id[len(prefix):]


def with_children(pids: List[int]) -> List[int]:
    out = list(pids)
    seen = set(out)
    for pid in pids:
        try:
            children = psutil.Process(pid).children(recursive=True)
        except (psutil.NoSuchProcess, psutil.AccessDenied):
            continue
        for ch in children:
            if ch.pid not in seen:
                seen.add(ch.pid)
                out.append(ch.pid)
    return out


def _run(cmd: List[str], container_id: str, timeout: float) -> str:
    try:
        return subprocess.check_output(cmd, text=True, stderr=subprocess.PIPE, timeout=timeout)
    except subprocess.CalledProcessError as e:
        reason = (e.stderr or "").strip() or f"exit status {e.returncode}"
        raise PidResolutionError(container_id, f"{cmd[0]} failed: {reason}") from e
    except subprocess.TimeoutExpired as e:
        raise PidResolutionError(container_id, f"{cmd[0]} timed out after {timeout}s") from e
    except OSError as e:
        raise PidResolutionError(container_id, f"cannot run {cmd[0]}: {e}") from e


def _checked_pid(container_id: str, pid: int) -> List[int]:
    # the runtime reports 0 for a container whose process is not (yet) running
    if pid <= 0:
        raise ProcessNotReady(container_id, pid)
    return [pid]


class DockerPidResolver:
    def __init__(self, timeout: float = 30.0, include_children: bool = False,
                 docker_bin: str = "docker"):
        self.timeout = timeout
        self.include_children = include_children
        self.docker_bin = docker_bin

    def get_pids(self, container_id: str) -> List[int]:
        cid = strip_prefix(container_id, DOCKER_PREFIX)
        out = _run([self.docker_bin, "inspect", "--format", "{{.State.Pid}}", cid],
                   container_id, self.timeout).strip()
        try:
            pid = int(out)
        except ValueError:
            raise PidResolutionError(container_id, f"container has no state: {out!r}") from None
        pids = _checked_pid(container_id, pid)
        return with_children(pids) if self.include_children else pids


class CriPidResolver:
    def __init__(self, timeout: float = 30.0, include_children: bool = False,
                 crictl_bin: str = "crictl"):
        self.timeout = timeout
        self.include_children = include_children
        self.crictl_bin = crictl_bin

    def get_pids(self, container_id: str) -> List[int]:
        prefix = next((p for p in CRI_PREFIXES if container_id.startswith(p)), None)
        if prefix is None:
            raise PidResolutionError(container_id, "not a CRI container ID")
        cid = container_id[len(prefix):]
        out = _run([self.crictl_bin, "inspect", "-o", "json", cid], container_id, self.timeout)
        try:
            info = json.loads(out).get("info") or {}
            pid = int(info.get("pid", 0))
        except (ValueError, TypeError, AttributeError) as e:
            raise PidResolutionError(container_id, f"unexpected crictl output: {e}") from e
        pids = _checked_pid(container_id, pid)
        return with_children(pids) if self.include_children else pids


class RuntimePidResolver:
    """Pick the resolver matching the container ID scheme."""

    def __init__(self, timeout: float = 30.0, include_children: bool = False,
                 resolvers: Optional[Dict[str, object]] = None):
        if resolvers is None:
            cri = CriPidResolver(timeout, include_children)
            resolvers = {DOCKER_PREFIX: DockerPidResolver(timeout, include_children)}
            resolvers.update({p: cri for p in CRI_PREFIXES})
        self.resolvers = resolvers

    def get_pids(self, container_id: str) -> List[int]:
        for prefix, r in self.resolvers.items():
            if container_id.startswith(prefix):
                pids = r.get_pids(container_id)
                log.debug("%s -> %s", container_id, pids)
                return pids
        raise PidResolutionError(container_id, "unsupported container runtime")
