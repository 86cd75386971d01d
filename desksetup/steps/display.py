"""Display manager and system service steps."""

import logging
from pathlib import Path

from desksetup import console
from desksetup.engine import ProvisionAction, RunContext
from desksetup.execution import missing_commands, probe_command, run_command

DEFAULT_DM_FILE = Path("/etc/X11/default-display-manager")
DM_SERVICE_LINK = Path("/etc/systemd/system/display-manager.service")
UNIT_DIR = Path("/usr/lib/systemd/system")
NOBEEP_CONF = Path("/etc/modprobe.d/nobeep.conf")
PROC_MODULES = Path("/proc/modules")

_logging = logging.getLogger(__name__)


def unit_installed(unit: str) -> bool:
    """Return True if systemd knows a unit file with this name."""
    result = probe_command(["systemctl", "list-unit-files", unit])
    return result is not None and unit in result.stdout


def module_loaded(module: str, proc_modules: Path = PROC_MODULES) -> bool:
    try:
        lines = proc_modules.read_text().splitlines()
    except OSError:
        return False
    return any(line.split(" ", 1)[0] == module for line in lines)


class ConfigureDisplayManager(ProvisionAction):
    """Make lightdm (or the configured manager) the default display manager."""

    description = "Set the default display manager"

    def __init__(
        self,
        dm_file: Path = DEFAULT_DM_FILE,
        service_link: Path = DM_SERVICE_LINK,
        unit_dir: Path = UNIT_DIR,
    ):
        self.dm_file = dm_file
        self.service_link = service_link
        self.unit_dir = unit_dir

    def _targets(self, ctx: RunContext) -> tuple[str, Path]:
        dm = ctx.settings.display_manager
        return f"/usr/sbin/{dm}", self.unit_dir / f"{dm}.service"

    def already_done(self, ctx: RunContext) -> str | None:
        binary, unit = self._targets(ctx)
        try:
            current = self.dm_file.read_text().strip()
        except OSError:
            return None
        if current == binary and self.service_link.is_symlink():
            if Path(self.service_link.readlink()) == unit:
                return f"{ctx.settings.display_manager} is already the default display manager"
        return None

    def missing_precondition(self, ctx: RunContext) -> str | None:
        dm = ctx.settings.display_manager
        if missing_commands(dm):
            return f"{dm} is not installed"
        return None

    def apply(self, ctx: RunContext) -> None:
        dm = ctx.settings.display_manager
        binary, unit = self._targets(ctx)
        console.msg(f"Configuring {dm} as default display manager...")

        run_command(
            ["debconf-set-selections"],
            input_text=f"{dm} shared/default-x-display-manager select {dm}\n",
        )
        self.dm_file.parent.mkdir(parents=True, exist_ok=True)
        self.dm_file.write_text(f"{binary}\n")

        if self.service_link.is_symlink() or self.service_link.exists():
            self.service_link.unlink()
        self.service_link.symlink_to(unit)

        competitor = f"{ctx.settings.competing_display_manager}.service"
        if unit_installed(competitor):
            if probe_command(["systemctl", "disable", competitor]) is None:
                _logging.info(f"Could not disable {competitor}, leaving it as is")
        run_command(["systemctl", "daemon-reload"])

        console.msg(f"{dm} configured.")


class DisableAutorandr(ProvisionAction):
    """Stop autorandr from re-applying display profiles on its own."""

    description = "Disable the autorandr systemd service"
    unit = "autorandr.service"

    def already_done(self, ctx: RunContext) -> str | None:
        if not unit_installed(self.unit):
            return f"{self.unit} is not installed"
        return None

    def apply(self, ctx: RunContext) -> None:
        console.msg("Disabling autorandr systemd service...")
        for action in ("disable", "stop"):
            if probe_command(["systemctl", action, self.unit]) is None:
                _logging.info(f"systemctl {action} {self.unit} did not succeed")


class DisableSystemBeep(ProvisionAction):
    description = "Blacklist and unload the PC speaker module"
    module = "pcspkr"

    def __init__(self, conf: Path = NOBEEP_CONF, proc_modules: Path = PROC_MODULES):
        self.conf = conf
        self.proc_modules = proc_modules

    def already_done(self, ctx: RunContext) -> str | None:
        try:
            blacklisted = f"blacklist {self.module}" in self.conf.read_text()
        except OSError:
            blacklisted = False
        if blacklisted and not module_loaded(self.module, self.proc_modules):
            return "system beep already disabled"
        return None

    def apply(self, ctx: RunContext) -> None:
        console.msg("Disabling system beep...")
        self.conf.parent.mkdir(parents=True, exist_ok=True)
        self.conf.write_text(f"blacklist {self.module}\n")
        if module_loaded(self.module, self.proc_modules):
            if probe_command(["rmmod", self.module]) is None:
                _logging.info(f"{self.module} stays loaded until reboot")
