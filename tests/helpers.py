import tarfile
from pathlib import Path
from typing import Dict


def install_runs(install_log: Path) -> int:
    """How many times the fake install command ran."""
    if not install_log.exists():
        return 0
    return len(install_log.read_text().splitlines())


def tree(directory: Path) -> Dict[str, bytes]:
    """Relative file path -> content for every file under ``directory``."""
    return {
        str(p.relative_to(directory)): p.read_bytes()
        for p in sorted(directory.rglob("*"))
        if p.is_file()
    }


def make_archive(cache_path: Path, source: Path, arcname: str) -> None:
    cache_path.parent.mkdir(parents=True, exist_ok=True)
    with tarfile.open(cache_path, "w:gz") as tar:
        tar.add(str(source), arcname=arcname)
