"""Restore an install directory from a cache entry."""

import logging
import shutil
import tarfile
import zlib
from pathlib import Path
from typing import Optional

from depcache.exceptions import ExtractFailedError

from .lock import LockMode, locked

logger = logging.getLogger(__name__)


def clear_directory(path: Path) -> None:
    """Remove ``path`` whatever it currently is; a missing path is fine."""
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    elif path.exists() or path.is_symlink():
        path.unlink()


def read_archive(
    cache_path: Path,
    install_directory: Path,
    root: Optional[Path] = None,
    lock_timeout: Optional[float] = None,
) -> None:
    """
    Replace ``install_directory`` with the contents of the cache entry.

    The directory is removed first; the archive is the sole source of truth on
    a hit. Extraction happens into ``root`` (defaults to cwd) because archive
    members are stored relative to it. On failure the directory is left
    cleared or partially extracted.

    Raises:
        ExtractFailedError: If the entry is missing, corrupt or cannot be written out
        LockTimeoutError: If a timeout is set and the reader lock was not granted
    """
    root = Path(root) if root else Path.cwd()
    install_directory = root / install_directory
    cache_path = Path(cache_path)

    logger.info(f"clearing installed dependencies at {install_directory}")
    try:
        clear_directory(install_directory)
    except OSError as e:
        raise ExtractFailedError(
            str(cache_path), f"could not clear {install_directory}: {e}"
        ) from e

    logger.info(f"extracting dependencies from {cache_path}")
    try:
        handle = open(cache_path, "rb")
    except OSError as e:
        raise ExtractFailedError(str(cache_path), str(e)) from e

    with handle, locked(handle, LockMode.SHARED, lock_timeout):
        try:
            with tarfile.open(fileobj=handle, mode="r:gz") as tar:
                tar.extractall(path=root, filter="data")
        except (OSError, EOFError, zlib.error, tarfile.TarError) as e:
            raise ExtractFailedError(str(cache_path), str(e)) from e
