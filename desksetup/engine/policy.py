"""Idempotency and precondition policy shared by every provisioning step.

A step is written as a ProvisionAction subclass that answers three
questions:

- already_done(): is the desired state already in place? A returned reason
  skips the step without touching the system.
- missing_precondition(): is something the effect needs absent? A returned
  description fails the step without attempting the effect.
- apply(): perform the mutation. Any exception raised here becomes a
  Failure outcome; the orchestrator never sees it.

Calling the action runs the checks in that order and maps the result to an
Outcome, so an instance can be used directly as Step.run.
"""

import logging

from desksetup.errors import CommandError, StepError

from .models import Outcome, RunContext

_logging = logging.getLogger(__name__)


class ProvisionAction:
    description: str = ""

    def already_done(self, ctx: RunContext) -> str | None:
        return None

    def missing_precondition(self, ctx: RunContext) -> str | None:
        return None

    def apply(self, ctx: RunContext) -> Outcome | None:
        raise NotImplementedError

    def __call__(self, ctx: RunContext) -> Outcome:
        done = self.already_done(ctx)
        if done:
            return Outcome.skipped(done)

        missing = self.missing_precondition(ctx)
        if missing:
            return Outcome.failure(f"missing precondition: {missing}")

        try:
            outcome = self.apply(ctx)
        except (StepError, CommandError, OSError) as e:
            _logging.debug(f"{type(self).__name__} effect failed: {e}")
            return Outcome.failure(str(e))
        except Exception as e:
            _logging.debug(f"{type(self).__name__} effect raised unexpectedly", exc_info=True)
            return Outcome.failure(f"unexpected error: {type(e).__name__}: {e}")

        return outcome or Outcome.success()


__all__ = ["ProvisionAction"]
