"""cli command removing the cache directory"""

import shutil
import sys
from pathlib import Path

import click

from depcache.cli.utils.logging import logger
from depcache.config import get_cache_dir


def abort_if_user_does_not_confirm(msg: str, logger):
    _msg = f"Are you sure you want to {msg}?"
    if not click.confirm(_msg, abort=True):
        logger.debug("aborting")
        raise click.Abort()


@click.command(name="clean")
@click.option(
    "-c",
    "--cache-directory",
    "--cacheDirectory",
    "cache_directory",
    type=click.Path(file_okay=False),
    default=None,
    help="Cache directory to remove. Default: ~/.package_cache",
)
@click.option(
    "-y",
    "--yes",
    help="Automatically confirm all prompts.",
    is_flag=True,
    default=False,
)
def clean(cache_directory, yes):
    """Delete every cached archive."""
    if cache_directory:
        cache_dir = Path(cache_directory).expanduser()
    else:
        cache_dir = get_cache_dir()
    if not cache_dir.exists():
        logger.info(f"cache directory {cache_dir} does not exist, nothing to clean")
        return

    if not yes:
        abort_if_user_does_not_confirm(f"remove {cache_dir}", logger)

    try:
        shutil.rmtree(cache_dir)
    except OSError as e:
        logger.error(f"Could not remove {cache_dir}: {e}")
        sys.exit(1)
    logger.info(f"removed {cache_dir}")
