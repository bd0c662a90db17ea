"""cli command listing the supported package managers"""

import click

from depcache.config import get_cache_dir
from depcache.managers import DEFAULT_MANAGERS, MANAGERS, build_config


@click.command(name="managers")
def managers():
    """List supported package managers."""
    for name in MANAGERS:
        config = build_config(name, get_cache_dir())
        marker = "*" if name in DEFAULT_MANAGERS else " "
        config_path = str(config.config_path)
        click.echo(
            f"{marker} {name:<10} {config_path:<15} -> {config.install_directory}"
        )
    click.echo("")
    click.echo("* installed by default when no manager is given")
