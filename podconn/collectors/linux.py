from __future__ import annotations
import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import List, Mapping, Optional, Tuple

from ..errors import DecodeError, MultiError, ReadError
from ..models import Connection, NONE_STATUS
from ..utils.net import decode_address
from ..utils.path import table_path

log = logging.getLogger(__name__)

DEFAULT_PROC_ROOT = "/proc"
MIN_FIELDS = 10

# /proc/net/tcp 'st' column, see include/net/tcp_states.h
TCP_STATES: Mapping[str, str] = MappingProxyType({
    "01": "ESTABLISHED",
    "02": "SYN_SENT",
    "03": "SYN_RECV",
    "04": "FIN_WAIT1",
    "05": "FIN_WAIT2",
    "06": "TIME_WAIT",
    "07": "CLOSE",
    "08": "CLOSE_WAIT",
    "09": "LAST_ACK",
    "0A": "LISTEN",
    "0B": "CLOSING",
})


@dataclass(frozen=True)
class SocketKind:
    family: str
    sock_type: str
    filename: str

    @property
    def is_tcp(self) -> bool:
        return self.sock_type == "tcp"


# TODO: ipv6 needs a 16-byte decoder in utils.net before these can be enabled
SOCKET_KINDS: Tuple[SocketKind, ...] = (
    SocketKind("inet", "tcp", "tcp"),
    # SocketKind("inet6", "tcp", "tcp6"),
    SocketKind("inet", "udp", "udp"),
    # SocketKind("inet6", "udp", "udp6"),
)


def tcp_status(code: str) -> str:
    return TCP_STATES.get(code.upper(), NONE_STATUS)


def parse_table(path: str, kind: SocketKind) -> List[Connection]:
    """Parse one tcp or udp socket table snapshot.

    Rows that are short or carry undecodable addresses are dropped; kernel
    tables can hold half-written rows while sockets churn. Only an unreadable
    file is an error (ReadError).
    """
    try:
        with open(path, "r", encoding="ascii", errors="replace") as fh:
            contents = fh.read()
    except OSError as e:
        raise ReadError(path, e) from e

    out: List[Connection] = []
    # first line is the header
    for line in contents.splitlines()[1:]:
        fields = line.split()
        if len(fields) < MIN_FIELDS:
            continue
        try:
            local = decode_address(kind.family, fields[1])
            remote = decode_address(kind.family, fields[2])
        except DecodeError:
            continue
        status = tcp_status(fields[3]) if kind.is_tcp else NONE_STATUS
        out.append(Connection(family=kind.family, kind=kind.sock_type,
                              local_address=local, remote_address=remote, status=status))
    return out


def connections_for_process(root: Optional[str], pid: int,
                            kinds: Tuple[SocketKind, ...] = SOCKET_KINDS,
                            table_dir: str = ""
                            ) -> Tuple[List[Connection], Optional[MultiError]]:
    """Connections visible in the network namespace of `pid`.

    Every kind is tried; failures are gathered into one MultiError returned
    next to whatever was parsed. The error is None when all kinds succeeded.
    Note the pid only selects the namespace, the sockets need not be its own.

    Tables are read from <root>/<pid>/<table_dir>/<kind.filename>; with the
    default empty table_dir that is <root>/<pid>/tcp. Pass table_dir="net" to
    read a live /proc, where the kernel keeps them under /proc/<pid>/net.
    """
    root = root or DEFAULT_PROC_ROOT
    out: List[Connection] = []
    errors: List[Exception] = []
    for k in kinds:
        path = table_path(root, pid, k.filename, table_dir)
        try:
            conns = parse_table(path, k)
        except ReadError as e:
            errors.append(e)
            continue
        out.extend(conns)
    return out, MultiError.from_errors(errors)


class ProcConnectionGetter:
    def __init__(self, root: Optional[str] = None, table_dir: str = ""):
        self.root = root or DEFAULT_PROC_ROOT
        self.table_dir = table_dir or ""

    def get_connections(self, pid: int) -> Tuple[List[Connection], Optional[MultiError]]:
        conns, err = connections_for_process(self.root, pid, table_dir=self.table_dir)
        log.debug("pid %d: %d connections from %s", pid, len(conns), self.root)
        return conns, err
