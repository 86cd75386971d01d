"""End-of-run summary rendering."""

from typing import Iterable

import click

from desksetup.console import RULE

SUCCESS_HEADLINE = "Setup complete! No errors."

NEXT_STEPS = [
    "Reboot and select 'i3' from the",
    "lightdm session picker to get started.",
    "",
    "  sudo reboot",
]


def _headline(failed: tuple[str, ...]) -> str:
    if not failed:
        return SUCCESS_HEADLINE
    return f"Setup complete with {len(failed)} failed step(s):"


def render_summary(failure_log: Iterable[str]) -> str:
    """Render the summary as plain text.

    Reads the failure log only; the process exit status does not depend on
    what is rendered here.
    """
    failed = tuple(failure_log)
    lines = ["", RULE, f"  {_headline(failed)}"]
    if failed:
        lines.append(RULE)
        lines.extend(f"  - {name}" for name in failed)
    lines.append(RULE)
    lines.append("")
    lines.extend(NEXT_STEPS)
    lines.append("")
    return "\n".join(lines)


def print_summary(failure_log: Iterable[str]) -> None:
    """Print the rendered summary with success/warning/failure colors."""
    failed = tuple(failure_log)

    click.echo("")
    click.echo(RULE)
    if not failed:
        click.secho(f"  {_headline(failed)}", fg="green")
    else:
        click.secho(f"  {_headline(failed)}", fg="yellow")
        click.echo(RULE)
        for name in failed:
            click.secho(f"  - {name}", fg="red")
    click.echo(RULE)
    click.echo("")
    for line in NEXT_STEPS:
        click.echo(line)
    click.echo("")


__all__ = [
    "SUCCESS_HEADLINE",
    "render_summary",
    "print_summary",
]
