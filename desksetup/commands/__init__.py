"""CLI command definitions for desksetup."""

import click

from desksetup import __version__, setup_logging
from desksetup.commands.list import list_steps, packages
from desksetup.commands.run import run


@click.group()
@click.version_option(__version__, prog_name="desksetup")
@click.option("--debug", is_flag=True, help="Enable debug output for troubleshooting")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Settings file (YAML); overrides $DESKSETUP_CONFIG",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Also write a debug log to this file",
)
@click.pass_context
def cli(ctx, debug, config_path, log_file):
    """Provision an i3 desktop on a fresh Ubuntu install."""
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug
    ctx.obj["config"] = config_path
    setup_logging(debug, log_file)


# Register all commands
cli.add_command(run)
cli.add_command(list_steps, name="steps")
cli.add_command(packages)

__all__ = ["cli"]


if __name__ == "__main__":
    cli()
