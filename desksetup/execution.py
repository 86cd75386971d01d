"""Blocking command execution utilities.

Every external tool desksetup drives (apt-get, systemctl, curl, git, ...) is
invoked through run_command(). There is no timeout: a hung command hangs the
run until the operator interrupts it. Output is decoded as text, with
undecodable bytes replaced.
"""

import logging
import os
import shlex
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Sequence

from .errors import CommandError

APT_ENV = {"DEBIAN_FRONTEND": "noninteractive"}

_logging = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    argv: list[str]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def _fmt_argv(argv: Sequence[str]) -> str:
    return " ".join(shlex.quote(a) for a in argv)


def run_command(
    argv: Sequence[str],
    *,
    check: bool = True,
    input_text: str | None = None,
    env: Mapping[str, str] | None = None,
    cwd: str | Path | None = None,
) -> CommandResult:
    """Run a command and capture its output.

    Args:
        argv: Program and arguments (never run through a shell)
        check: Raise CommandError on a non-zero exit status
        input_text: Text fed to the command's stdin
        env: Extra environment variables layered over os.environ
        cwd: Explicit working directory for the child process

    Returns:
        CommandResult with the captured output

    Raises:
        CommandError: If check is set and the command fails, or the
            program cannot be started
    """
    argv_list = [str(a) for a in argv]
    _logging.debug(f"Running command: {_fmt_argv(argv_list)}")

    try:
        proc = subprocess.run(
            argv_list,
            input=input_text,
            text=True,
            errors="replace",
            capture_output=True,
            cwd=cwd,
            env=dict(os.environ, **(env or {})),
        )
    except OSError as e:
        _logging.debug(f"Could not start {argv_list[0]}: {e}")
        raise CommandError(argv_list, 127, str(e)) from e

    if proc.stderr:
        _logging.debug(f"stderr: {proc.stderr.strip()}")

    result = CommandResult(
        argv=argv_list,
        returncode=proc.returncode,
        stdout=proc.stdout or "",
        stderr=proc.stderr or "",
    )
    if check and not result.ok:
        raise CommandError(argv_list, result.returncode, result.stderr)
    return result


def probe_command(argv: Sequence[str], **kwargs) -> CommandResult | None:
    """Run a best-effort command.

    Returns the result when the command succeeded and None when it failed or
    could not be started. Callers use this for cleanup that is allowed to be
    absent, such as disabling a service that may not be installed.
    """
    try:
        result = run_command(argv, check=False, **kwargs)
    except CommandError:
        return None
    if not result.ok:
        _logging.debug(f"Best-effort command returned {result.returncode}: {_fmt_argv(result.argv)}")
        return None
    return result


def command_exists(name: str) -> bool:
    """Return True if an executable is resolvable on PATH."""
    return shutil.which(name) is not None


def missing_commands(*names: str) -> str | None:
    """Describe the executables from names that are not on PATH, if any."""
    missing = [name for name in names if not command_exists(name)]
    if not missing:
        return None
    return f"{', '.join(missing)} not found"


def as_user(username: str, argv: Sequence[str], env: Mapping[str, str] | None = None) -> list[str]:
    """Wrap argv so it runs as an unprivileged user through sudo."""
    prefix = ["sudo", "-u", username]
    if env:
        prefix += ["env", *(f"{k}={v}" for k, v in env.items())]
    return [*prefix, *argv]


def fetch_text(url: str) -> str:
    """Fetch the body of an HTTPS URL with curl.

    Raises:
        CommandError: If the download fails
    """
    result = run_command(["curl", "-fsSL", url])
    return result.stdout


def fetch_to_file(url: str, dest: Path) -> Path:
    """Download url to dest (an explicit path, never the working directory)."""
    run_command(["curl", "-fsSL", "-o", str(dest), url])
    return dest


def apt_get(*args: str, check: bool = True) -> CommandResult:
    """Run apt-get in non-interactive batch mode."""
    return run_command(["apt-get", *args], check=check, env=APT_ENV)


__all__ = [
    "APT_ENV",
    "CommandResult",
    "run_command",
    "probe_command",
    "command_exists",
    "missing_commands",
    "as_user",
    "fetch_text",
    "fetch_to_file",
    "apt_get",
]
