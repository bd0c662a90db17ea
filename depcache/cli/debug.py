import click

from .utils.logging import configure_logging


def add_debug_option(cmd: click.Command) -> click.Command:
    """Add a --debug/--no-debug flag to a command or group."""
    if not any(param.name == "debug" for param in cmd.params):
        cmd.params.insert(
            0,
            click.Option(
                ["--debug/--no-debug"],
                is_eager=True,
                expose_value=False,
                callback=lambda ctx, param, value: _set_debug(ctx, value),
                help="Enable debug mode",
            ),
        )
    return cmd


def _set_debug(ctx, value: bool):
    root_ctx = ctx.find_root()
    root_ctx.ensure_object(dict)

    if "DEBUG" not in root_ctx.obj:
        root_ctx.obj["DEBUG"] = False

    # A subcommand may turn debug on; only the group may turn it off again
    if value is True or ctx is root_ctx:
        root_ctx.obj["DEBUG"] = value

    configure_logging(root_ctx.obj["DEBUG"])
    return root_ctx.obj["DEBUG"]
