import os
from pathlib import Path
from typing import Optional


def to_abs_path(p: Optional[str | os.PathLike]) -> Optional[Path]:
    """Convert p to an absolute path: absolute paths are expanded and
    resolved, relative ones are taken from the current directory."""
    if not p:
        return None
    pp = Path(p).expanduser()
    if not pp.is_absolute():
        pp = Path.cwd() / pp
    return pp.resolve()


def table_path(root: str, pid: int, filename: str, table_dir: str = "") -> str:
    if table_dir:
        return os.path.join(root, str(pid), table_dir, filename)
    return os.path.join(root, str(pid), filename)
