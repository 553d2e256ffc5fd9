from .linux import (SOCKET_KINDS, TCP_STATES, ProcConnectionGetter, SocketKind,
                    connections_for_process, parse_table)
from .aggregate import collect

__all__ = ["SOCKET_KINDS", "TCP_STATES", "ProcConnectionGetter", "SocketKind",
           "connections_for_process", "parse_table", "collect"]
