from __future__ import annotations
import pytest

TCP_HEADER = ("  sl  local_address rem_address   st tx_queue rx_queue tr tm->when "
              "retrnsmt   uid  timeout inode")
UDP_HEADER = ("   sl  local_address rem_address   st tx_queue rx_queue tr tm->when "
              "retrnsmt   uid  timeout inode ref pointer drops")


def tcp_row(sl: int, local: str, remote: str, st: str) -> str:
    return (f"   {sl}: {local} {remote} {st} 00000000:00000000 00:00000000 00000000  "
            f"1000        0 {12345 + sl} 1 0000000000000000 100 0 0 10 0")


def udp_row(sl: int, local: str, remote: str) -> str:
    return (f"  {sl}: {local} {remote} 07 00000000:00000000 00:00000000 00000000     0"
            f"        0 {17890 + sl} 2 0000000000000000 0")


@pytest.fixture
def proc_root(tmp_path):
    """Returns a function writing <root>/<pid>/<name> socket tables under tmp_path.

    table_dir="net" writes the live /proc layout, <root>/<pid>/net/<name>.
    """
    root = tmp_path / "proc"

    def write(pid: int, name: str, rows, header: str | None = None, table_dir: str = ""):
        d = root / str(pid) / table_dir if table_dir else root / str(pid)
        d.mkdir(parents=True, exist_ok=True)
        if header is None:
            header = TCP_HEADER if name == "tcp" else UDP_HEADER
        (d / name).write_text("\n".join([header, *rows]) + "\n", encoding="ascii")
        return d / name

    write.root = root
    return write
