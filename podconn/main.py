from __future__ import annotations
import argparse, logging, sys
from .config import CFG, init_cfg_from_args
from .collectors import ProcConnectionGetter
from .errors import ConfigError, WorkloadListError
from .monitor import Monitor
from .report import dumps, result_to_dict
from .runtime import RuntimePidResolver
from .workloads import make_lister
from .web import create_app


def parse_args(argv=None):
    ap = argparse.ArgumentParser(description='Attribute TCP/UDP sockets on this node to the pods that own them')
    ap.add_argument('--config', type=str, default=None, help='YAML or JSON file with CFG keys')
    ap.add_argument('--proc-root', type=str, default=None, help='process filesystem root (default /proc)')
    ap.add_argument('--table-dir', type=str, default=None, help='subdirectory of <proc-root>/<pid> holding the tcp/udp tables (use "net" on a live /proc)')
    ap.add_argument('--node-name', type=str, default=None, help='node to collect for (default: FQDN of this host)')
    ap.add_argument('--workloads-file', type=str, default=None, help='static YAML/JSON workload list instead of the Kubernetes API')
    ap.add_argument('--kubeconfig', type=str, default=None)
    ap.add_argument('--in-cluster', action='store_true', help='use the pod service account')
    ap.add_argument('--include-children', action='store_true', help='also read the namespaces of child processes')
    ap.add_argument('--log-level', type=str.upper, default='WARNING',
                    choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'])
    ap.add_argument('--serve', action='store_true', help='serve /api/connections over HTTP instead of printing once')
    ap.add_argument('--host', type=str, default=None)
    ap.add_argument('--port', type=int, default=None)
    return ap.parse_args(argv)


def build_monitor(cfg: CFG) -> Monitor:
    return Monitor(
        lister=make_lister(cfg),
        pid_resolver=RuntimePidResolver(cfg.runtime_timeout, cfg.include_children),
        connection_getter=ProcConnectionGetter(cfg.proc_root, cfg.table_dir),
        cfg=cfg,
    )


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level,
                        format='%(asctime)s %(levelname)s %(name)s %(message)s')
    try:
        cfg = init_cfg_from_args(args)
        monitor = build_monitor(cfg)
    except ConfigError as e:
        print(f"[error] {e}", file=sys.stderr)
        return 2

    if args.serve:
        app = create_app(cfg, monitor)
        print(f"[*] Serving on http://{cfg.host}:{cfg.port}/api/connections")
        app.run(host=cfg.host, port=cfg.port, debug=False, use_reloader=False)
        return 0

    try:
        result = monitor.collect()
    except WorkloadListError as e:
        print(f"[error] {e}", file=sys.stderr)
        return 1
    print(dumps(result_to_dict(result), pretty=True))
    return 0


if __name__ == '__main__':
    sys.exit(main())
