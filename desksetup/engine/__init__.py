"""Step engine: outcome types, step policy, orchestration and reporting."""

from .models import (
    FailureLog,
    Outcome,
    OutcomeStatus,
    RunContext,
    Step,
)
from .orchestrator import run_steps
from .policy import ProvisionAction
from .summary import SUCCESS_HEADLINE, print_summary, render_summary

__all__ = [
    "FailureLog",
    "Outcome",
    "OutcomeStatus",
    "RunContext",
    "Step",
    "ProvisionAction",
    "run_steps",
    "SUCCESS_HEADLINE",
    "render_summary",
    "print_summary",
]
