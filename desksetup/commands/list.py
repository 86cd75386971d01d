"""Steps and packages listing commands."""

import sys

import click

from desksetup.config import ConfigError, load_settings
from desksetup.errors import PackageListError, format_error
from desksetup.packages import load_package_list
from desksetup.steps import build_steps


@click.command()
def list_steps():
    """List the provisioning steps in execution order."""
    steps = build_steps()
    width = max(len(step.name) for step in steps)

    for i, step in enumerate(steps, 1):
        kind = "isolated" if step.isolated else "fatal"
        description = getattr(step.run, "description", "")
        click.echo(f"{i:>2}. {step.name:<{width}}  [{kind}]  {description}")


@click.command()
@click.option("--all", "show_all", is_flag=True, help="Include tagged (inert) rows")
@click.pass_context
def packages(ctx, show_all: bool):
    """Show the packages the package list would install."""
    try:
        settings = load_settings(ctx.obj.get("config"))
        entries = list(load_package_list(settings.programs_url))
    except (ConfigError, PackageListError) as e:
        click.echo(format_error(str(e)), err=True)
        sys.exit(1)

    shown = entries if show_all else [e for e in entries if e.active]
    for entry in shown:
        tag = f"[{entry.tag}] " if entry.tag else ""
        click.echo(f"{tag}{entry.name}: {entry.description}")

    active = sum(1 for e in entries if e.active)
    click.echo(f"\n{active} of {len(entries)} package(s) active.")
