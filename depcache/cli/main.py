"""depcache CLI"""

import click

from depcache import __version__
from depcache.cli.clean import clean
from depcache.cli.hash import hash_
from depcache.cli.install import install
from depcache.cli.managers import managers

from .debug import add_debug_option


@click.group()
@click.version_option(__version__, prog_name="depcache")
@click.pass_context
def cli(ctx):
    """
    Cache package manager installs in content-addressed archives.
    """
    ctx.ensure_object(dict)


cli.add_command(add_debug_option(install))
cli.add_command(add_debug_option(hash_))
cli.add_command(add_debug_option(clean))
cli.add_command(add_debug_option(managers))

add_debug_option(cli)

if __name__ == "__main__":
    cli(obj={})
