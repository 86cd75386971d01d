"""Pytest fixtures and utilities for desksetup tests."""

import logging
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

import pytest

import desksetup
from desksetup.config import Settings
from desksetup.engine import RunContext


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers installed by setup_logging() during a CLI invocation."""
    yield
    root = logging.getLogger()
    while desksetup._handlers:
        handler = desksetup._handlers.pop()
        root.removeHandler(handler)
        handler.close()


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def settings() -> Settings:
    """Built-in default settings."""
    return Settings()


@pytest.fixture
def user_home(temp_dir: Path) -> Path:
    """An empty home directory for the target user."""
    home = temp_dir / "home" / "alice"
    home.mkdir(parents=True)
    return home


@pytest.fixture
def run_context(user_home: Path, settings: Settings) -> RunContext:
    """A RunContext whose ownership changes are no-ops for the test process."""
    return RunContext(
        username="alice",
        user_home=user_home,
        uid=os.getuid(),
        gid=os.getgid(),
        settings=settings,
    )


class ScriptedTerminal:
    """Terminal double that replays a fixed list of answers."""

    def __init__(self, answers):
        self.answers = list(answers)
        self.said: list[str] = []
        self.asked = 0

    def ask(self, message: str) -> str:
        self.asked += 1
        if not self.answers:
            raise AssertionError("terminal asked more often than scripted")
        return self.answers.pop(0)

    def say(self, message: str) -> None:
        self.said.append(message)


@pytest.fixture
def scripted_terminal():
    """Build a ScriptedTerminal and a terminal factory that yields it."""

    def _create(*answers):
        terminal = ScriptedTerminal(answers)

        @contextmanager
        def factory():
            yield terminal

        return terminal, factory

    return _create
