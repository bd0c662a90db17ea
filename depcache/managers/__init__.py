"""
Package manager definitions.

The registry is an explicit mapping from manager name to a factory building its
DependencyConfig. Adding a manager means adding a module here and an entry in
MANAGERS; nothing is discovered at runtime.
"""

from pathlib import Path
from typing import Callable, Dict, List

from depcache.exceptions import UnknownManagerError

from .base import DependencyConfig, md5, query_version
from .bower import bower_config
from .composer import composer_config
from .npm import npm_config
from .yarn import yarn_config

ConfigFactory = Callable[..., DependencyConfig]

MANAGERS: Dict[str, ConfigFactory] = {
    "npm": npm_config,
    "yarn": yarn_config,
    "bower": bower_config,
    "composer": composer_config,
}

# yarn shares node_modules with npm, so it only runs when asked for explicitly
DEFAULT_MANAGERS: List[str] = ["npm", "bower", "composer"]


def available_managers() -> List[str]:
    return list(MANAGERS)


def build_config(
    name: str,
    cache_directory: Path,
    force_refresh: bool = False,
    install_options: str = "",
) -> DependencyConfig:
    """
    Build the configuration for a registered package manager.

    Raises:
        UnknownManagerError: If ``name`` is not registered
    """
    try:
        factory = MANAGERS[name]
    except KeyError:
        raise UnknownManagerError(name)
    return factory(
        cache_directory=Path(cache_directory).expanduser(),
        force_refresh=force_refresh,
        install_options=install_options,
    )


__all__ = [
    "DEFAULT_MANAGERS",
    "DependencyConfig",
    "MANAGERS",
    "available_managers",
    "build_config",
    "md5",
    "query_version",
]
