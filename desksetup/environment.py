"""Environment resolution: privilege, platform and target user.

Everything here runs before the first step and only reads system state. Any
problem is fatal: the functions raise FatalError and the caller stops the
process.

Interactive input is read from the controlling terminal rather than stdin,
so desksetup keeps working when its own input is a pipe.
"""

import logging
import os
import pwd
import re
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, ContextManager, Iterator, Protocol

from prompt_toolkit import PromptSession
from prompt_toolkit.input import create_input
from prompt_toolkit.output import create_output

from . import console
from .config import Settings
from .engine.models import RunContext
from .errors import CommandError, FatalError
from .execution import command_exists, run_command

TTY_DEVICE = "/dev/tty"
USERNAME_PATTERN = re.compile(r"^[a-z_][a-z0-9_.-]*\$?$", re.IGNORECASE)

_logging = logging.getLogger(__name__)


class Terminal(Protocol):
    def ask(self, message: str) -> str:
        ...

    def say(self, message: str) -> None:
        ...


class TtyTerminal:
    """Line-oriented prompts on the controlling terminal."""

    def __init__(self, session: PromptSession, stream):
        self._session = session
        self._stream = stream

    def ask(self, message: str) -> str:
        try:
            return self._session.prompt(message)
        except EOFError:
            raise FatalError("Terminal closed while waiting for an answer.")

    def say(self, message: str) -> None:
        self._stream.write(f"{message}\n")
        self._stream.flush()


@contextmanager
def controlling_terminal(device: str = TTY_DEVICE) -> Iterator[TtyTerminal]:
    """Open the controlling terminal for prompting.

    Raises:
        FatalError: If there is no controlling terminal to read from
    """
    try:
        tty_in = open(device, "r")
    except OSError as e:
        raise FatalError(f"Cannot open {device} for input: {e}") from e

    try:
        with open(device, "w") as tty_out:
            session = PromptSession(
                input=create_input(stdin=tty_in),
                output=create_output(stdout=tty_out),
            )
            yield TtyTerminal(session, tty_out)
    finally:
        tty_in.close()


def ask_yes_no(terminal: Terminal, question: str) -> bool:
    """Ask until the answer starts with y or n (either case)."""
    terminal.say(question)
    while True:
        answer = terminal.ask("").strip()
        if answer[:1] in ("y", "Y"):
            return True
        if answer[:1] in ("n", "N"):
            return False
        terminal.say("Please enter y or n.")


def confirm_start(terminal: Terminal) -> None:
    """Ask for the single go-ahead before any change is made.

    Raises:
        FatalError: If the operator declines
    """
    if not ask_yes_no(terminal, "Ready to begin? (y/n)"):
        raise FatalError("User exited.")


def check_privilege() -> None:
    if os.geteuid() != 0:
        raise FatalError("This script must be run as root (use sudo).")


def check_platform(expected: str = "Ubuntu") -> str:
    """Verify the distribution through lsb_release and return its release."""
    if not command_exists("lsb_release"):
        raise FatalError(f"lsb_release not found. Is this {expected}?")

    try:
        distro = run_command(["lsb_release", "-si"]).stdout.strip()
        release = run_command(["lsb_release", "-sr"]).stdout.strip()
    except CommandError as e:
        raise FatalError(f"lsb_release failed: {e}") from e

    if distro != expected:
        raise FatalError(f"This script is designed for {expected}. Detected: {distro}")

    console.msg(f"{distro} {release} detected.")
    return release


def prompt_username(terminal: Terminal) -> str:
    """Ask for a username until the answer looks like an account name."""
    terminal.say("Enter the username to configure:")
    while True:
        answer = terminal.ask("").strip()
        if answer and USERNAME_PATTERN.match(answer):
            return answer
        terminal.say("Please enter a valid username.")


def resolve_username(
    terminal_factory: Callable[[], ContextManager[Terminal]] = controlling_terminal,
    environ: dict | None = None,
) -> str:
    """Pick the user to configure.

    The account that invoked sudo is used when it is known and is not root.
    Otherwise the operator is asked on the controlling terminal.
    """
    environ = os.environ if environ is None else environ
    sudo_user = environ.get("SUDO_USER", "")
    if sudo_user and sudo_user != "root":
        console.msg(f"Configuring for user: {sudo_user}")
        return sudo_user

    with terminal_factory() as terminal:
        return prompt_username(terminal)


def lookup_account(username: str) -> pwd.struct_passwd:
    try:
        return pwd.getpwnam(username)
    except KeyError:
        raise FatalError(f"User '{username}' does not exist.")


def resolve_environment(
    settings: Settings,
    terminal_factory: Callable[[], ContextManager[Terminal]] = controlling_terminal,
    environ: dict | None = None,
) -> RunContext:
    """Run the preflight checks and build the RunContext.

    Raises:
        FatalError: On any failed precondition
    """
    check_privilege()
    check_platform(settings.expected_distro)

    username = resolve_username(terminal_factory, environ)
    account = lookup_account(username)

    home = Path(account.pw_dir)
    if not home.is_dir():
        raise FatalError(f"Home directory {home} does not exist.")

    _logging.info(f"Resolved target user {username} (uid={account.pw_uid}, home={home})")
    return RunContext(
        username=username,
        user_home=home,
        uid=account.pw_uid,
        gid=account.pw_gid,
        settings=settings,
    )


__all__ = [
    "TTY_DEVICE",
    "Terminal",
    "TtyTerminal",
    "controlling_terminal",
    "ask_yes_no",
    "confirm_start",
    "check_privilege",
    "check_platform",
    "prompt_username",
    "resolve_username",
    "lookup_account",
    "resolve_environment",
]
