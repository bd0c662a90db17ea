"""
Common package manager configuration, regardless of npm/yarn/bower/composer.
"""

import hashlib
import re
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional

from depcache.exceptions import CliVersionError


@dataclass(frozen=True)
class DependencyConfig:
    """
    Everything the cache needs to know about one package manager.

    Relative paths are interpreted against the directory the load operation
    runs in (the project root).
    """

    cli_name: str
    install_command: str
    install_directory: Path
    config_path: Path
    cache_directory: Path
    get_file_hash: Callable[[Path], str] = field(repr=False, compare=False)
    get_cli_version: Callable[[], str] = field(repr=False, compare=False)
    install_options: str = ""
    force_refresh: bool = False

    @property
    def full_install_command(self) -> str:
        return f"{self.install_command} {self.install_options}".strip()

    def config_path_in(self, root: Optional[Path] = None) -> Path:
        return (Path(root) if root else Path.cwd()) / self.config_path

    def install_directory_in(self, root: Optional[Path] = None) -> Path:
        return (Path(root) if root else Path.cwd()) / self.install_directory


# https://stackoverflow.com/a/3431838
def md5(fname) -> str:
    hash_md5 = hashlib.md5()
    with open(fname, "rb") as f:
        for chunk in iter(lambda: f.read(4096), b""):
            hash_md5.update(chunk)
    return hash_md5.hexdigest()


def check_call(command: str, use_shell: bool = True) -> subprocess.CompletedProcess:
    return subprocess.run(
        command,
        text=True,
        capture_output=True,
        check=False,
        shell=use_shell,
    )


_VERSION_PATTERN = re.compile(r"\d+(?:\.\d+)+(?:[-+][0-9A-Za-z.\-]+)?")


def query_version(cli_name: str, command: str, extract: bool = False) -> str:
    """
    Run ``command`` and return the version it prints.

    Args:
        cli_name: Name of the tool, for error messages
        command: Shell command printing the version (e.g. "npm --version")
        extract: Pick the first dotted version token out of a longer banner

    Raises:
        CliVersionError: If the command fails or prints no usable version
    """
    try:
        ret = check_call(command)
    except OSError as e:
        raise CliVersionError(cli_name, str(e))

    if ret.returncode != 0:
        message = ret.stderr.strip() or f"exit code {ret.returncode}"
        raise CliVersionError(cli_name, message)

    output = ret.stdout.strip()
    if extract:
        match = _VERSION_PATTERN.search(output)
        if match is None:
            raise CliVersionError(cli_name, f"unexpected output {output!r}")
        return match.group(0)

    # Some tools print warnings before the version; the version is the last line
    lines = [line.strip() for line in output.splitlines() if line.strip()]
    if not lines:
        raise CliVersionError(cli_name, "empty version output")
    return lines[-1]
