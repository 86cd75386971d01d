"""Ordered step execution with failure isolation."""

import logging
from typing import Sequence

from desksetup import console
from desksetup.errors import FatalError

from .models import FailureLog, Outcome, OutcomeStatus, RunContext, Step

_logging = logging.getLogger(__name__)


def run_steps(context: RunContext, steps: Sequence[Step]) -> FailureLog:
    """Run each step once, in order, and collect the isolated failures.

    Args:
        context: Resolved run state handed to every step
        steps: Steps in execution order

    Returns:
        FailureLog naming the isolated steps that failed

    Raises:
        FatalError: When a non-isolated step fails; nothing after it runs
    """
    failures = FailureLog()

    for step in steps:
        _logging.info(f"Running step {step.name}")
        try:
            outcome = step.run(context)
        except Exception as e:
            _logging.debug(f"Step {step.name} raised", exc_info=True)
            outcome = Outcome.failure(f"unexpected error: {type(e).__name__}: {e}")

        if outcome.status == OutcomeStatus.FAILURE:
            if not step.isolated:
                _logging.error(f"Fatal step {step.name} failed: {outcome.reason}")
                raise FatalError(f"{step.name} failed: {outcome.reason}", step=step.name)

            console.warn(f"{step.name} failed. ({outcome.reason})")
            failures.record(step.name)
        elif outcome.status == OutcomeStatus.SKIPPED:
            console.msg(f"{step.name}: {outcome.reason}, skipping.")
        else:
            _logging.info(f"Step {step.name} succeeded")

    return failures


__all__ = ["run_steps"]
