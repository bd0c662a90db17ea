"""cli command installing dependencies through the cache"""

import sys
from pathlib import Path

import click
import humanfriendly

from depcache.cache import LoadStatus, all_succeeded, load_all
from depcache.cli.utils.logging import logger
from depcache.config import get_cache_dir, get_lock_timeout, get_max_workers
from depcache.managers import DEFAULT_MANAGERS, MANAGERS, build_config


def log_error_and_quit(logger, error):
    logger.error(error)
    sys.exit(1)


def select_managers(requested):
    """Known managers among ``requested``, or the defaults when none were named."""
    if not requested:
        return list(DEFAULT_MANAGERS)

    selected = []
    for name in requested:
        if name not in MANAGERS:
            logger.warning(f"unknown package manager {name}, ignoring")
        elif name not in selected:
            selected.append(name)
    return selected


@click.command(name="install")
@click.argument("managers", nargs=-1)
@click.option(
    "-c",
    "--cache-directory",
    "--cacheDirectory",
    "cache_directory",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory where dependencies will be cached. Default: ~/.package_cache",
)
@click.option(
    "-f",
    "--force-refresh",
    "--forceRefresh",
    "force_refresh",
    is_flag=True,
    default=False,
    help="Run the install command even if a cached archive exists.",
)
@click.option(
    "-o",
    "--install-options",
    type=str,
    default="",
    help="Options appended to every install command, "
    "e.g. --install-options=--production",
)
@click.option(
    "--lock-timeout",
    type=str,
    default=None,
    help="Maximum wait for cache locks, e.g. 30s or 5m. Default: wait forever.",
)
@click.option(
    "-j",
    "--jobs",
    type=click.IntRange(min=1),
    default=None,
    help="Number of package managers processed in parallel. Default: all at once.",
)
def install(
    managers, cache_directory, force_refresh, install_options, lock_timeout, jobs
):
    """Install specified dependencies, reusing cached archives when possible.

    Without MANAGERS, npm, bower and composer dependencies are installed.

    Examples:

      depcache install

      depcache install bower npm

      depcache install bower --cache-directory /home/cache/
    """
    try:
        if lock_timeout is None:
            timeout_s = get_lock_timeout()
        else:
            timeout_s = humanfriendly.parse_timespan(lock_timeout)
    except humanfriendly.InvalidTimespan as e:
        log_error_and_quit(logger, f"Invalid timeout value: {e}")
        return

    selected = select_managers(managers)
    if not selected:
        log_error_and_quit(logger, "no known package managers to install")
        return

    if cache_directory:
        cache_dir = Path(cache_directory).expanduser()
    else:
        cache_dir = get_cache_dir()
    logger.info(f"using {cache_dir} as cache directory")
    if not cache_dir.exists():
        logger.info("creating cache directory")
        try:
            cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            log_error_and_quit(logger, f"Could not create cache directory: {e}")
            return

    configs = []
    for name in selected:
        logger.info(f"installing {name} dependencies")
        configs.append(
            build_config(
                name,
                cache_dir,
                force_refresh=force_refresh,
                install_options=install_options,
            )
        )

    outcomes = load_all(
        configs, lock_timeout=timeout_s, max_workers=jobs or get_max_workers()
    )

    for outcome in outcomes:
        if outcome.status is LoadStatus.FAILED:
            logger.error(f"[{outcome.manager}] failed: {outcome.error}")
        else:
            logger.info(f"[{outcome.manager}] {outcome.status.value}")

    if all_succeeded(outcomes):
        logger.info("successfully installed all dependencies")
        sys.exit(0)
    log_error_and_quit(logger, "error installing dependencies")
