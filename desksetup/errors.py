"""Exception types and error formatting utilities.

This module holds the exceptions shared across desksetup and the helpers used
to format user-facing error messages consistently.

Error Style Guide:
- User-facing errors use 'Error: ' prefix
- Field errors use structured format: '<entity> field '<field>' <issue>'
- Use present tense: 'must be', 'is required'
- Fatal conditions raise FatalError; isolated step problems raise StepError
  and are turned into a Failure outcome by the step policy
"""

from typing import Sequence


class DesksetupError(Exception):
    """Base class for all desksetup errors."""


class FatalError(DesksetupError):
    """Raised when the whole run must stop immediately.

    Covers failed preconditions (privilege, platform, missing home directory),
    an explicit decline at the confirmation prompt, and the failure of a step
    marked as non-isolated.
    """

    def __init__(self, message: str, step: str | None = None):
        super().__init__(message)
        self.step = step


class StepError(DesksetupError):
    """Raised inside a step effect when the effect cannot complete."""


class CommandError(DesksetupError):
    """Raised when an external command exits with a non-zero status."""

    def __init__(self, argv: Sequence[str], returncode: int, stderr: str = ""):
        self.argv = list(argv)
        self.returncode = returncode
        self.stderr = stderr
        detail = stderr.strip().splitlines()[-1] if stderr.strip() else ""
        message = f"Command failed ({returncode}): {' '.join(self.argv)}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class PackageListError(DesksetupError):
    """Raised when the package list cannot be downloaded or holds no rows.

    The reason is either "download" or "empty".
    """

    def __init__(self, reason: str, message: str):
        super().__init__(message)
        self.reason = reason


def format_error(message: str) -> str:
    """Format an error message with consistent prefix.

    Args:
        message: The error message to format

    Returns:
        Formatted error message with 'Error: ' prefix

    Examples:
        >>> format_error("user 'bob' does not exist")
        "Error: user 'bob' does not exist"
    """
    return f"Error: {message}"


def format_field_error(entity: str, field: str, issue: str) -> str:
    """Format a field validation error with structured format.

    Examples:
        >>> format_field_error("Config", "cursor_size", "must be an int")
        "Config field 'cursor_size' must be an int"
    """
    return f"{entity} field '{field}' {issue}"


__all__ = [
    "DesksetupError",
    "FatalError",
    "StepError",
    "CommandError",
    "PackageListError",
    "format_error",
    "format_field_error",
]
