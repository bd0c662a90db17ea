"""cli command printing the config hash of each package manager"""

from pathlib import Path

import click

from depcache.cli.utils.logging import logger
from depcache.config import get_cache_dir
from depcache.managers import MANAGERS, build_config


@click.command(name="hash")
@click.argument("managers", nargs=-1)
def hash_(managers):
    """Print the hash of each package manager's config file in the current directory.

    The hash is the last component of the cache entry name, which makes it easy
    to find the archive a project would use.
    """
    root = Path.cwd()
    for name in managers or MANAGERS:
        if name not in MANAGERS:
            logger.warning(f"unknown package manager {name}, ignoring")
            continue
        config = build_config(name, get_cache_dir())
        config_path = config.config_path_in(root)
        if not config_path.exists():
            logger.debug(f"[{name}] {config_path} does not exist")
            continue
        click.echo(f"{name}: {config.get_file_hash(config_path)}")
