from __future__ import annotations
from typing import Any, Dict, List

import orjson

from .models import Connection, WorkloadRef


def connection_to_dict(c: Connection) -> Dict[str, str]:
    return {
        "family": c.family,
        "type": c.kind,
        "localAddress": c.local_address,
        "remoteAddress": c.remote_address,
        "status": c.status,
    }


def result_to_dict(result: Dict[WorkloadRef, List[Connection]]) -> List[Dict[str, Any]]:
    out = []
    for ref in sorted(result, key=lambda r: (r.namespace, r.name)):
        conns = sorted(result[ref], key=lambda c: c.key)
        out.append({
            "name": ref.name,
            "namespace": ref.namespace,
            "connections": [connection_to_dict(c) for c in conns],
        })
    return out


def dumps(obj: Any, pretty: bool = False) -> str:
    opts = orjson.OPT_INDENT_2 if pretty else 0
    return orjson.dumps(obj, option=opts).decode()
