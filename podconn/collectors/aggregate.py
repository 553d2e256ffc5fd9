from __future__ import annotations
import logging
from typing import Iterable, Optional, Union

from ..models import ConnectionSet, Workload

log = logging.getLogger(__name__)

Logger = Union[logging.Logger, logging.LoggerAdapter]


def collect(pids: Iterable[int], getter, logger: Optional[Logger] = None,
            workload: Optional[Workload] = None) -> ConnectionSet:
    """Merge the connections seen from every pid owning one workload.

    Connections are keyed without their status, so one socket seen from
    several pids is kept once. On a collision the pid processed last wins;
    `pids` is usually a set, so which status survives is not defined.
    """
    logger = logger or log
    name = workload.name if workload else ""
    namespace = workload.namespace if workload else ""
    out: ConnectionSet = {}
    for pid in pids:
        # errors and connections can both come back; the process may have
        # exited since its pid was resolved
        try:
            conns, err = getter.get_connections(pid)
        except Exception as e:
            logger.warning("failed to get connections name=%s namespace=%s pid=%d: %r",
                           name, namespace, pid, e)
            continue
        if err is not None:
            logger.warning("failed to get connections name=%s namespace=%s pid=%d: %s",
                           name, namespace, pid, err)
        for c in conns or ():
            out[c.key] = c
    return out
