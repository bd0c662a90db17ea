"""
Publish an installed dependency directory as a cache entry.

The archive is built in a sibling temporary file (``<entry>.tar.gz~``) under an
exclusive lock and renamed onto its final name once complete, so readers only
ever see whole archives. Concurrent writers for the same entry queue on the
temporary file; whoever gets the lock after the entry was published skips the
work.
"""

import logging
import os
import tarfile
from enum import Enum
from pathlib import Path
from typing import IO, Optional

from depcache.exceptions import ArchiveFailedError

from .lock import LockMode, locked

logger = logging.getLogger(__name__)

TEMP_SUFFIX = "~"


class WriteResult(Enum):
    WRITTEN = "written"
    SKIPPED_MISSING = "skipped_missing"
    SKIPPED_EXISTS = "skipped_exists"


def temp_path_for(cache_path: Path) -> Path:
    return cache_path.with_name(cache_path.name + TEMP_SUFFIX)


def _is_same_file(handle: IO, path: Path) -> bool:
    """Whether ``handle`` still refers to the file currently at ``path``."""
    try:
        st = os.stat(path)
    except FileNotFoundError:
        return False
    fst = os.fstat(handle.fileno())
    return (st.st_dev, st.st_ino) == (fst.st_dev, fst.st_ino)


def _discard(handle: IO, tmp_path: Path) -> None:
    if not _is_same_file(handle, tmp_path):
        return
    try:
        tmp_path.unlink()
    except OSError as e:
        logger.warning(f"Could not remove temporary archive {tmp_path}: {e}")


def archive_member_name(installed_directory: Path, root: Path) -> str:
    """
    Name under which ``installed_directory`` is stored in the archive.

    Names are relative to ``root`` so that extracting into ``root`` recreates
    the directory in place.
    """
    arcname = os.path.relpath(installed_directory, root)
    if arcname == os.curdir or arcname.split(os.sep)[0] == os.pardir:
        raise ArchiveFailedError(
            str(installed_directory), f"install directory must be inside {root}"
        )
    return arcname


def _compress(
    handle: IO,
    installed_directory: Path,
    arcname: str,
    root: Path,
    tmp_path: Path,
    cache_path: Path,
) -> None:
    # Refuse members the reader's "data" extraction filter would reject
    def extractable(member: tarfile.TarInfo) -> tarfile.TarInfo:
        tarfile.data_filter(member, str(root))
        return member

    try:
        handle.truncate(0)
        handle.seek(0)
        with tarfile.open(fileobj=handle, mode="w:gz") as tar:
            tar.add(str(installed_directory), arcname=arcname, filter=extractable)
        handle.flush()
        os.fsync(handle.fileno())
        os.replace(tmp_path, cache_path)
    except (OSError, tarfile.TarError) as e:
        _discard(handle, tmp_path)
        raise ArchiveFailedError(str(installed_directory), str(e)) from e


def write_archive(
    installed_directory: Path,
    cache_path: Path,
    root: Optional[Path] = None,
    lock_timeout: Optional[float] = None,
) -> WriteResult:
    """
    Compress ``installed_directory`` into the cache entry at ``cache_path``.

    Args:
        installed_directory: Directory populated by the install command
        cache_path: Final path of the cache entry
        root: Directory archive member names are relative to (defaults to cwd)
        lock_timeout: Seconds to wait for the writer lock, None to wait forever

    Returns:
        WRITTEN when this call produced the entry, SKIPPED_MISSING when there
        was nothing to archive, SKIPPED_EXISTS when another writer got there first

    Raises:
        ArchiveFailedError: If compression or the final rename fails, or the
            directory holds links that could not be extracted again
        LockTimeoutError: If a timeout is set and the lock was not granted
    """
    root = Path(root) if root else Path.cwd()
    installed_directory = root / installed_directory
    cache_path = Path(cache_path)

    if not installed_directory.exists():
        logger.info(
            f"skipping archive. Install directory {installed_directory} does not exist."
        )
        return WriteResult.SKIPPED_MISSING

    arcname = archive_member_name(installed_directory, root)
    tmp_path = temp_path_for(cache_path)
    try:
        tmp_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ArchiveFailedError(str(cache_path), str(e)) from e

    while True:
        try:
            # Append mode: opening must not clobber an archive another writer
            # is still producing.
            handle = open(tmp_path, "ab")
        except OSError as e:
            raise ArchiveFailedError(str(tmp_path), str(e)) from e

        with handle, locked(handle, LockMode.EXCLUSIVE, lock_timeout):
            if cache_path.exists():
                logger.info(
                    f"skipping archive because {cache_path} already exists."
                )
                _discard(handle, tmp_path)
                return WriteResult.SKIPPED_EXISTS

            if not _is_same_file(handle, tmp_path):
                # The previous lock holder renamed or removed the file we locked
                logger.debug(f"{tmp_path} was replaced while waiting, retrying")
                continue

            logger.debug(f"compressing {installed_directory} into {tmp_path}")
            _compress(
                handle, installed_directory, arcname, root, tmp_path, cache_path
            )
            return WriteResult.WRITTEN
