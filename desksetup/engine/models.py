"""Data models for the step engine."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Iterator

from desksetup.config import Settings


class OutcomeStatus(Enum):
    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILURE = "failure"


@dataclass(frozen=True)
class Outcome:
    status: OutcomeStatus
    reason: str | None = None

    @classmethod
    def success(cls, reason: str | None = None) -> "Outcome":
        return cls(OutcomeStatus.SUCCESS, reason)

    @classmethod
    def skipped(cls, reason: str) -> "Outcome":
        return cls(OutcomeStatus.SKIPPED, reason)

    @classmethod
    def failure(cls, reason: str) -> "Outcome":
        return cls(OutcomeStatus.FAILURE, reason)

    @property
    def failed(self) -> bool:
        return self.status == OutcomeStatus.FAILURE


@dataclass
class RunContext:
    """State of a single invocation, resolved before any step runs."""

    username: str
    user_home: Path
    uid: int
    gid: int
    settings: Settings = field(default_factory=Settings)
    scratch: dict[str, Any] = field(default_factory=dict)


@dataclass
class Step:
    name: str
    run: Callable[[RunContext], Outcome]
    isolated: bool = True


class FailureLog:
    """Append-only record of the steps that failed, in execution order."""

    def __init__(self) -> None:
        self._names: list[str] = []

    def record(self, step_name: str) -> None:
        self._names.append(step_name)

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(self._names)

    @property
    def clean(self) -> bool:
        return not self._names

    def __len__(self) -> int:
        return len(self._names)

    def __iter__(self) -> Iterator[str]:
        return iter(tuple(self._names))

    def __repr__(self) -> str:
        return f"FailureLog({self._names!r})"


__all__ = [
    "OutcomeStatus",
    "Outcome",
    "RunContext",
    "Step",
    "FailureLog",
]
