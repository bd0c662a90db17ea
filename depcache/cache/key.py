"""Derive the on-disk location of a cache entry from a manager configuration."""

import logging
import os
from pathlib import Path
from typing import NamedTuple, Optional

from depcache.managers.base import DependencyConfig

logger = logging.getLogger(__name__)

ARCHIVE_EXTENSION = ".tar.gz"


class CacheKey(NamedTuple):
    cli_name: str
    cli_version: str
    config_hash: str


class CacheLocation(NamedTuple):
    entry_directory: Path
    cache_path: Path


def cache_key(config: DependencyConfig, root: Optional[Path] = None) -> CacheKey:
    """
    Build the cache key for a configuration.

    The manager version is queried on every call, so upgrading the manager
    moves subsequent lookups to a new location.
    """
    config_hash = config.get_file_hash(config.config_path_in(root))
    cli_version = config.get_cli_version()
    return CacheKey(config.cli_name, cli_version, config_hash)


def location_for(cache_directory: Path, key: CacheKey) -> CacheLocation:
    """
    Layout:
        <cache_directory>/<cli_name>/<cli_version>/<config_hash>.tar.gz
    """
    entry_directory = (
        Path(cache_directory).expanduser() / key.cli_name / key.cli_version
    )
    cache_path = entry_directory / f"{key.config_hash}{ARCHIVE_EXTENSION}"
    return CacheLocation(
        Path(os.path.abspath(entry_directory)), Path(os.path.abspath(cache_path))
    )


def resolve(config: DependencyConfig, root: Optional[Path] = None) -> CacheLocation:
    """
    Resolve where the cache entry for ``config`` lives.

    ``config.config_path`` must exist. No filesystem changes are made.

    Args:
        config: Package manager configuration
        root: Directory relative config paths are resolved against (defaults to cwd)

    Returns:
        CacheLocation with the per-version entry directory and the archive path
    """
    key = cache_key(config, root)
    logger.debug(f"[{config.cli_name}] cache key: {key}")
    return location_for(config.cache_directory, key)
