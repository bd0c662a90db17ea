"""
Load dependencies for a package manager, from the cache when possible.

One load operation walks through:

    check config -> check tool -> resolve key -> extract
                                              -> install -> archive

A missing config file ends the operation successfully (nothing to install for
that manager). Every other failure is fatal for that manager only: it is logged,
recorded in the returned LoadOutcome and never retried.

Several managers are loaded concurrently by ``load_all``; each runs to its own
completion and the outcomes are collected in input order.
"""

import concurrent.futures as cf
import logging
import shutil
import subprocess
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable, List, Optional

from depcache.exceptions import (
    ConfigHashError,
    DepCacheError,
    InstallFailedError,
    ToolNotFoundError,
)
from depcache.managers.base import DependencyConfig

from .key import resolve
from .reader import read_archive
from .writer import WriteResult, write_archive

logger = logging.getLogger(__name__)


class LoadStatus(Enum):
    SKIPPED = "skipped"
    EXTRACTED = "extracted"
    INSTALLED = "installed"
    FAILED = "failed"


@dataclass
class LoadOutcome:
    manager: str
    status: LoadStatus
    cache_path: Optional[Path] = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.status is not LoadStatus.FAILED


def tool_available(cli_name: str) -> bool:
    return shutil.which(cli_name) is not None


class CacheOrchestrator:
    """Runs a single load operation for one package manager."""

    def __init__(
        self,
        config: DependencyConfig,
        root: Optional[Path] = None,
        lock_timeout: Optional[float] = None,
    ):
        """
        Args:
            config: Package manager configuration
            root: Project directory installs run in (defaults to cwd)
            lock_timeout: Seconds to wait for cache locks, None to wait forever
        """
        self.config = config
        self.root = Path(root) if root else Path.cwd()
        self.lock_timeout = lock_timeout
        self._cache_path: Optional[Path] = None

    def log_info(self, message: str) -> None:
        logger.info(f"[{self.config.cli_name}] {message}")

    def log_error(self, message: str) -> None:
        logger.error(f"[{self.config.cli_name}] {message}")

    def check_tool(self) -> None:
        if not tool_available(self.config.cli_name):
            raise ToolNotFoundError(self.config.cli_name)
        self.log_info("cli exists")

    def install_dependencies(self) -> None:
        command = self.config.full_install_command
        self.log_info(f"running [{command}]...")
        try:
            ret = subprocess.run(command, shell=True, cwd=self.root, check=False)
        except OSError as e:
            self.log_error(f"could not start [{command}]: {e}")
            raise InstallFailedError(command, -1) from e
        if ret.returncode != 0:
            raise InstallFailedError(command, ret.returncode)
        self.log_info(f"installed {self.config.cli_name} dependencies, now archiving")

    def archive_dependencies(self, cache_path: Path) -> WriteResult:
        installed_directory = self.config.install_directory_in(self.root)
        self.log_info(f"archiving dependencies from {installed_directory}")
        result = write_archive(
            installed_directory, cache_path, self.root, self.lock_timeout
        )
        if result is WriteResult.WRITTEN:
            self.log_info("installed and archived dependencies")
        return result

    def extract_dependencies(self, cache_path: Path) -> None:
        read_archive(
            cache_path,
            self.config.install_directory_in(self.root),
            self.root,
            self.lock_timeout,
        )
        self.log_info("done extracting")

    def _load(self) -> LoadOutcome:
        name = self.config.cli_name
        config_path = self.config.config_path_in(self.root)
        if not config_path.exists():
            self.log_info(
                f"Dependency config file {config_path} does not exist. Skipping install"
            )
            return LoadOutcome(name, LoadStatus.SKIPPED)
        self.log_info("config file exists")

        self.check_tool()

        try:
            location = resolve(self.config, self.root)
        except OSError as e:
            raise ConfigHashError(str(config_path), str(e)) from e
        cache_path = location.cache_path
        self._cache_path = cache_path
        self.log_info(f"cache entry: {cache_path}")

        if not self.config.force_refresh and cache_path.exists():
            self.log_info("cache exists")
            self.extract_dependencies(cache_path)
            return LoadOutcome(name, LoadStatus.EXTRACTED, cache_path)

        self.install_dependencies()
        self.archive_dependencies(cache_path)
        return LoadOutcome(name, LoadStatus.INSTALLED, cache_path)

    def load(self) -> LoadOutcome:
        """
        Run the load operation to completion.

        Returns:
            LoadOutcome; failures are reported through ``status`` and ``error``
        """
        try:
            return self._load()
        except DepCacheError as e:
            self.log_error(str(e))
            return LoadOutcome(
                self.config.cli_name, LoadStatus.FAILED, self._cache_path, e
            )


def load_all(
    configs: Iterable[DependencyConfig],
    root: Optional[Path] = None,
    lock_timeout: Optional[float] = None,
    max_workers: Optional[int] = None,
) -> List[LoadOutcome]:
    """
    Load several package managers concurrently.

    A failing manager does not cancel the others; every operation runs to
    completion before this returns.

    Returns:
        One LoadOutcome per config, in input order
    """
    configs = list(configs)
    if not configs:
        return []

    with cf.ThreadPoolExecutor(max_workers=max_workers or len(configs)) as ex:
        futures = [
            ex.submit(CacheOrchestrator(config, root, lock_timeout).load)
            for config in configs
        ]

    outcomes = []
    for config, future in zip(configs, futures):
        try:
            outcomes.append(future.result())
        except Exception as e:
            logger.error(f"[{config.cli_name}] unexpected error: {e}")
            outcomes.append(LoadOutcome(config.cli_name, LoadStatus.FAILED, error=e))
    return outcomes


def all_succeeded(outcomes: Iterable[LoadOutcome]) -> bool:
    return all(outcome.ok for outcome in outcomes)
