import json

import pytest

from podconn import main as cli

from .conftest import tcp_row


def test_main_prints_json(tmp_path, proc_root, monkeypatch, capsys):
    proc_root(321, "tcp", [tcp_row(0, "0100007F:1538", "00000000:0000", "0A")])
    proc_root(321, "udp", [])
    workloads = tmp_path / "workloads.yaml"
    workloads.write_text("- name: db\n  namespace: data\n  containers:\n"
                         "    - {name: pg, id: 'docker://pg1'}\n")
    monkeypatch.setattr(cli.RuntimePidResolver, "get_pids", lambda self, cid: [321])

    rc = cli.main(["--workloads-file", str(workloads), "--node-name", "n1",
                   "--proc-root", str(proc_root.root)])
    assert rc == 0
    out = json.loads(capsys.readouterr().out)
    assert out == [{"name": "db", "namespace": "data", "connections": [{
        "family": "inet", "type": "tcp", "localAddress": "127.0.0.1:5432",
        "remoteAddress": "0.0.0.0:0", "status": "LISTEN"}]}]


def test_main_lister_failure(tmp_path, capsys):
    rc = cli.main(["--workloads-file", str(tmp_path / "missing.yaml"), "--node-name", "n1"])
    assert rc == 1
    assert "failed to get pods" in capsys.readouterr().err


def test_main_bad_config(tmp_path, capsys):
    p = tmp_path / "c.yaml"
    p.write_text("bogus: 1\n")
    assert cli.main(["--config", str(p)]) == 2
    assert "unknown config keys" in capsys.readouterr().err


def test_unknown_log_level_is_a_usage_error(capsys):
    with pytest.raises(SystemExit) as exc:
        cli.parse_args(["--log-level", "verbose"])
    assert exc.value.code == 2
    assert "invalid choice" in capsys.readouterr().err


def test_log_level_is_case_insensitive():
    assert cli.parse_args(["--log-level", "debug"]).log_level == "DEBUG"
    assert cli.parse_args([]).log_level == "WARNING"


def test_table_dir_flag(tmp_path, proc_root, monkeypatch, capsys):
    proc_root(321, "tcp", [tcp_row(0, "0100007F:1538", "00000000:0000", "0A")], table_dir="net")
    proc_root(321, "udp", [], table_dir="net")
    workloads = tmp_path / "workloads.yaml"
    workloads.write_text("- name: db\n  containers:\n    - {name: pg, id: 'docker://pg1'}\n")
    monkeypatch.setattr(cli.RuntimePidResolver, "get_pids", lambda self, cid: [321])

    assert cli.main(["--workloads-file", str(workloads), "--node-name", "n1",
                     "--proc-root", str(proc_root.root), "--table-dir", "net"]) == 0
    out = json.loads(capsys.readouterr().out)
    assert out[0]["connections"][0]["localAddress"] == "127.0.0.1:5432"
