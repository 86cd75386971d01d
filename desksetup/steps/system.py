"""System package steps."""

import logging

from desksetup import console
from desksetup.engine import Outcome, ProvisionAction, RunContext
from desksetup.errors import PackageListError, StepError
from desksetup.execution import apt_get, missing_commands
from desksetup.packages import install_entries, load_package_list

_logging = logging.getLogger(__name__)


class SystemUpdate(ProvisionAction):
    description = "Refresh package indexes and upgrade installed packages"

    def missing_precondition(self, ctx: RunContext) -> str | None:
        return missing_commands("apt-get")

    def apply(self, ctx: RunContext) -> None:
        console.msg("Updating system packages...")
        apt_get("update", "-qq")
        apt_get("upgrade", "-y", "-qq")


class InstallPackages(ProvisionAction):
    description = "Install every active entry of the package list"

    def missing_precondition(self, ctx: RunContext) -> str | None:
        return missing_commands("apt-get")

    def apply(self, ctx: RunContext) -> Outcome:
        console.msg("Downloading package list...")
        try:
            entries = load_package_list(ctx.settings.programs_url)
        except PackageListError as e:
            raise StepError(str(e)) from e

        failed = install_entries(entries)
        if failed:
            _logging.warning(f"{len(failed)} package(s) failed to install: {', '.join(failed)}")
            return Outcome.success(f"{len(failed)} package(s) failed to install")
        return Outcome.success()
