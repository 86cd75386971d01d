"""Tests for the desksetup CLI."""

from unittest.mock import patch

import pytest
from click.testing import CliRunner

from desksetup import __version__
from desksetup.commands import cli
from desksetup.engine import Outcome, Step
from desksetup.errors import FatalError, PackageListError
from desksetup.packages import PackageEntry


@pytest.fixture
def runner():
    """Create a CliRunner for testing."""
    return CliRunner()


@pytest.fixture
def no_config(temp_dir, monkeypatch):
    """Make sure no user config file leaks into the run."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(temp_dir / "xdg"))
    monkeypatch.delenv("DESKSETUP_CONFIG", raising=False)


def spy_steps(calls, outcomes, fatal=()):
    def make(name, outcome):
        def run(ctx):
            calls.append(name)
            return outcome

        return Step(name, run, isolated=name not in fatal)

    return [make(name, outcome) for name, outcome in outcomes]


class TestCli:
    """Tests for the command group."""

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_steps_lists_every_step(self, runner):
        result = runner.invoke(cli, ["steps"])

        assert result.exit_code == 0
        lines = result.output.splitlines()
        assert len(lines) == 14
        assert lines[0].startswith(" 1. system update")
        assert "[isolated]" in lines[0]
        assert lines[-1].startswith("14. font cache")

    def test_log_file(self, runner, temp_dir):
        log_file = temp_dir / "logs" / "desksetup.log"
        result = runner.invoke(cli, ["--log-file", str(log_file), "steps"])

        assert result.exit_code == 0
        assert log_file.exists()


class TestRunCommand:
    """Tests for the run command."""

    def test_run_reports_failures(self, runner, run_context, no_config):
        calls = []
        steps = spy_steps(
            calls,
            [("alpha", Outcome.success()), ("beta", Outcome.failure("boom")), ("gamma", Outcome.success())],
        )

        with patch("desksetup.commands.run.resolve_environment", return_value=run_context), patch(
            "desksetup.commands.run.build_steps", return_value=steps
        ):
            result = runner.invoke(cli, ["run", "--yes"])

        assert result.exit_code == 0
        assert calls == ["alpha", "beta", "gamma"]
        assert "Setup complete with 1 failed step(s):" in result.output
        assert "  - beta" in result.output

    def test_run_clean(self, runner, run_context, no_config):
        steps = spy_steps([], [("alpha", Outcome.success()), ("beta", Outcome.skipped("present"))])

        with patch("desksetup.commands.run.resolve_environment", return_value=run_context), patch(
            "desksetup.commands.run.build_steps", return_value=steps
        ):
            result = runner.invoke(cli, ["run", "--yes"])

        assert result.exit_code == 0
        assert "Setup complete! No errors." in result.output
        assert "beta: present, skipping." in result.output

    def test_precondition_failure_exits_before_steps(self, runner, no_config):
        error = FatalError("This script must be run as root (use sudo).")

        with patch("desksetup.commands.run.resolve_environment", side_effect=error), patch(
            "desksetup.commands.run.build_steps"
        ) as mock_build:
            result = runner.invoke(cli, ["run", "--yes"])

        assert result.exit_code == 1
        assert "ERROR: This script must be run as root (use sudo)." in result.output
        assert "Setup complete" not in result.output
        mock_build.assert_not_called()

    def test_fatal_step_stops_run(self, runner, run_context, no_config):
        calls = []
        steps = spy_steps(
            calls,
            [("alpha", Outcome.failure("disk full")), ("beta", Outcome.success())],
            fatal=("alpha",),
        )

        with patch("desksetup.commands.run.resolve_environment", return_value=run_context), patch(
            "desksetup.commands.run.build_steps", return_value=steps
        ):
            result = runner.invoke(cli, ["run", "--yes"])

        assert result.exit_code == 1
        assert calls == ["alpha"]
        assert "ERROR: alpha failed: disk full" in result.output

    def test_decline_exits_without_changes(self, runner, scripted_terminal, no_config):
        terminal, factory = scripted_terminal("n")

        with patch("desksetup.commands.run.controlling_terminal", factory), patch(
            "desksetup.commands.run.resolve_environment"
        ) as mock_resolve:
            result = runner.invoke(cli, ["run"])

        assert result.exit_code == 1
        assert "User exited." in result.output
        assert terminal.said == ["Ready to begin? (y/n)"]
        mock_resolve.assert_not_called()

    def test_confirmation_accepted(self, runner, scripted_terminal, run_context, no_config):
        _, factory = scripted_terminal("y")

        with patch("desksetup.commands.run.controlling_terminal", factory), patch(
            "desksetup.commands.run.resolve_environment", return_value=run_context
        ), patch("desksetup.commands.run.build_steps", return_value=[]):
            result = runner.invoke(cli, ["run"])

        assert result.exit_code == 0
        assert "Setup complete! No errors." in result.output

    def test_invalid_config(self, runner, temp_dir):
        config = temp_dir / "config.yaml"
        config.write_text("colour: gruvbox\n")

        result = runner.invoke(cli, ["--config", str(config), "run", "--yes"])

        assert result.exit_code == 1
        assert "Unknown config key: colour" in result.output


class TestPackagesCommand:
    """Tests for the packages command."""

    ENTRIES = [
        PackageEntry("", "git", "VCS tool"),
        PackageEntry("x", "foo", "not installed"),
    ]

    def test_lists_active_packages(self, runner, no_config):
        with patch("desksetup.commands.list.load_package_list", return_value=iter(self.ENTRIES)):
            result = runner.invoke(cli, ["packages"])

        assert result.exit_code == 0
        assert "git: VCS tool" in result.output
        assert "foo" not in result.output
        assert "1 of 2 package(s) active." in result.output

    def test_all_includes_tagged_rows(self, runner, no_config):
        with patch("desksetup.commands.list.load_package_list", return_value=iter(self.ENTRIES)):
            result = runner.invoke(cli, ["packages", "--all"])

        assert "[x] foo: not installed" in result.output

    def test_download_error(self, runner, no_config):
        error = PackageListError("download", "Failed to download package list: 404")
        with patch("desksetup.commands.list.load_package_list", side_effect=error):
            result = runner.invoke(cli, ["packages"])

        assert result.exit_code == 1
        assert "Error: Failed to download package list" in result.output
