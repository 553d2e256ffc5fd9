import json

import pytest

from podconn.config import CFG, init_cfg_from_args, load_config
from podconn.errors import ConfigError
from podconn.main import parse_args
from podconn.utils.path import to_abs_path


def test_defaults():
    cfg = load_config(None)
    assert cfg == CFG()
    assert cfg.proc_root == "/proc"
    assert cfg.node_name is None


def test_yaml_config(tmp_path):
    p = tmp_path / "podconn.yaml"
    p.write_text("proc_root: /host/proc\nnode_name: worker-1\nport: '9000'\n"
                 "workloads_file: pods.yaml\ninclude_children: true\n")
    cfg = load_config(str(p))
    assert cfg.proc_root == "/host/proc"
    assert cfg.node_name == "worker-1"
    assert cfg.port == 9000
    assert cfg.include_children is True
    assert cfg.workloads_file.is_absolute()


def test_json_config(tmp_path):
    p = tmp_path / "podconn.json"
    p.write_text(json.dumps({"runtime_timeout": 5, "in_cluster": True}))
    cfg = load_config(str(p))
    assert cfg.runtime_timeout == 5.0
    assert cfg.in_cluster is True


@pytest.mark.parametrize("body", ["[1, 2]", "{\"proc_rot\": \"/x\"}", "{\"port\": \"http\"}", "{not json"])
def test_bad_config(tmp_path, body):
    p = tmp_path / "podconn.json"
    p.write_text(body)
    with pytest.raises(ConfigError):
        load_config(str(p))


def test_missing_config(tmp_path):
    with pytest.raises(ConfigError):
        load_config(str(tmp_path / "nope.yaml"))


def test_flags_override_file(tmp_path):
    p = tmp_path / "podconn.yaml"
    p.write_text("node_name: from-file\nproc_root: /host/proc\n")
    args = parse_args(["--config", str(p), "--node-name", "from-flag", "--in-cluster", "--port", "9100"])
    cfg = init_cfg_from_args(args)
    assert cfg.node_name == "from-flag"
    assert cfg.proc_root == "/host/proc"
    assert cfg.in_cluster is True
    assert cfg.port == 9100


def test_relative_paths_resolve_from_cwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert to_abs_path("pods.yaml") == (tmp_path / "pods.yaml").resolve()
    assert to_abs_path(None) is None


def test_table_dir_from_config(tmp_path):
    p = tmp_path / "podconn.yaml"
    p.write_text("table_dir: net\n")
    assert load_config(str(p)).table_dir == "net"
    assert CFG().table_dir == ""
