"""Run command implementation."""

import logging
import sys
from pathlib import Path
from typing import Callable, ContextManager

import click

from desksetup import console
from desksetup.config import ConfigError, load_settings
from desksetup.engine import FailureLog, print_summary, run_steps
from desksetup.environment import (
    Terminal,
    confirm_start,
    controlling_terminal,
    resolve_environment,
)
from desksetup.errors import FatalError
from desksetup.steps import build_steps

INTRO = [
    "This will install i3 with gruvbox-dark",
    "theme and all supporting tools.",
]

_logging = logging.getLogger(__name__)


@click.command()
@click.option("--yes", "-y", is_flag=True, help="Skip the confirmation prompt")
@click.pass_context
def run(ctx, yes: bool):
    """Provision the desktop environment (requires root)."""
    try:
        failures = run_setup(ctx.obj.get("config"), assume_yes=yes)
    except (FatalError, ConfigError) as e:
        console.error(str(e))
        sys.exit(1)

    print_summary(failures)


def run_setup(
    config_path: Path | str | None,
    assume_yes: bool = False,
    terminal_factory: Callable[[], ContextManager[Terminal]] | None = None,
) -> FailureLog:
    """Confirm, resolve the environment and run every step.

    Raises:
        FatalError: On a failed precondition, a decline or a fatal step
        ConfigError: If the settings file is invalid
    """
    terminal_factory = terminal_factory or controlling_terminal
    settings = load_settings(config_path)

    console.banner("Ubuntu i3 Setup", INTRO)
    if not assume_yes:
        with terminal_factory() as terminal:
            confirm_start(terminal)

    context = resolve_environment(settings, terminal_factory)

    console.msg("Starting installation...")
    failures = run_steps(context, build_steps())
    _logging.info(f"Run finished with {len(failures)} failed step(s)")
    return failures
