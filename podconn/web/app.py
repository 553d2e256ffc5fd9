from __future__ import annotations
from flask import Flask, Response

from ..config import CFG
from ..errors import WorkloadListError
from ..report import dumps, result_to_dict


def _json(obj, status: int = 200) -> Response:
    resp = Response(dumps(obj), status=status, mimetype="application/json")
    # every request is a fresh collection
    resp.headers["Cache-Control"] = "no-store, no-cache, must-revalidate, max-age=0"
    return resp


def create_app(cfg: CFG, monitor) -> Flask:
    app = Flask(__name__)

    @app.get("/healthz")
    def healthz():
        return _json({"ok": True, "node": monitor.node_name})

    @app.get("/api/connections")
    def api_connections():
        try:
            result = monitor.collect()
        except WorkloadListError as e:
            app.logger.warning("collection failed: %s", e)
            return _json({"ok": False, "error": str(e)}, status=502)
        return _json({"ok": True, "node": monitor.node_name, "workloads": result_to_dict(result)})

    return app
