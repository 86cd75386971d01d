"""Operator-facing terminal output."""

import click

RULE = "=" * 38


def msg(text: str) -> None:
    click.secho(f">> {text}", fg="green")


def warn(text: str) -> None:
    click.secho(f">> WARNING: {text}", fg="yellow")


def error(text: str) -> None:
    click.secho(f">> ERROR: {text}", fg="red", err=True)


def banner(title: str, lines: list[str]) -> None:
    click.echo(RULE)
    click.echo(f"  {title}")
    click.echo(RULE)
    click.echo("")
    for line in lines:
        click.echo(line)
    click.echo("")
