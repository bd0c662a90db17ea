"""
Content-addressed cache of package manager install results.

Layout:
    <cache_directory>/<cli_name>/<cli_version>/<config_hash>.tar.gz

Components:
    key.py           - cache key and entry location
    lock.py          - exclusive/shared advisory file locks
    writer.py        - atomic, race-tolerant archive creation
    reader.py        - clear-then-extract of an entry
    orchestrator.py  - hit/miss decision and parallel fan-out over managers
"""

from .key import ARCHIVE_EXTENSION, CacheKey, CacheLocation, cache_key, resolve
from .lock import LockMode, acquire, locked, release
from .orchestrator import (
    CacheOrchestrator,
    LoadOutcome,
    LoadStatus,
    all_succeeded,
    load_all,
)
from .reader import read_archive
from .writer import WriteResult, write_archive

__all__ = [
    "ARCHIVE_EXTENSION",
    "CacheKey",
    "CacheLocation",
    "CacheOrchestrator",
    "LoadOutcome",
    "LoadStatus",
    "LockMode",
    "WriteResult",
    "acquire",
    "all_succeeded",
    "cache_key",
    "load_all",
    "locked",
    "read_archive",
    "release",
    "resolve",
    "write_archive",
]
