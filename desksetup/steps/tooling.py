"""Developer tooling steps: nvm, Go, VS Code and the Starship prompt."""

import logging
import shutil
from pathlib import Path

from desksetup import console
from desksetup.engine import ProvisionAction, RunContext
from desksetup.errors import CommandError, StepError
from desksetup.execution import (
    apt_get,
    as_user,
    command_exists,
    fetch_text,
    fetch_to_file,
    missing_commands,
    probe_command,
    run_command,
)
from desksetup.fsutil import chown_tree, ensure_line
from desksetup.staging import staging_area

_logging = logging.getLogger(__name__)


class InstallNvm(ProvisionAction):
    description = "Install nvm for the user"

    def already_done(self, ctx: RunContext) -> str | None:
        if (ctx.user_home / ".nvm" / "nvm.sh").is_file():
            return "nvm already installed"
        return None

    def missing_precondition(self, ctx: RunContext) -> str | None:
        return missing_commands("curl", "bash")

    def apply(self, ctx: RunContext) -> None:
        console.msg("Installing nvm...")
        nvm_dir = ctx.user_home / ".nvm"
        nvm_dir.mkdir(parents=True, exist_ok=True)
        chown_tree(nvm_dir, ctx.uid, ctx.gid)

        script = fetch_text(ctx.settings.nvm_install_url)
        if not script.strip():
            raise StepError("Failed to download nvm install script.")

        env = {"HOME": str(ctx.user_home), "NVM_DIR": str(nvm_dir)}
        try:
            run_command(as_user(ctx.username, ["bash"], env=env), input_text=script)
        except CommandError as e:
            raise StepError(f"nvm install script returned an error: {e}") from e

        chown_tree(nvm_dir, ctx.uid, ctx.gid)


class InstallGo(ProvisionAction):
    """Install the latest Go release under go_root.

    The latest version is looked up once by already_done() and kept in the
    run context's scratch space for apply().
    """

    description = "Install the latest Go toolchain"
    scratch_key = "go_version"

    def _latest_version(self, ctx: RunContext) -> str | None:
        if self.scratch_key not in ctx.scratch:
            try:
                lines = fetch_text(ctx.settings.go_version_url).splitlines()
            except CommandError as e:
                _logging.debug(f"Go version lookup failed: {e}")
                lines = []
            ctx.scratch[self.scratch_key] = lines[0].strip() if lines else None
        return ctx.scratch[self.scratch_key]

    def installed_version(self, ctx: RunContext) -> str | None:
        go = Path(ctx.settings.go_root) / "bin" / "go"
        if not go.exists():
            return None
        result = probe_command([str(go), "version"])
        if result is None:
            return None
        # "go version go1.22.3 linux/amd64"
        parts = result.stdout.split()
        return parts[2] if len(parts) > 2 else None

    def already_done(self, ctx: RunContext) -> str | None:
        if not command_exists("curl"):
            return None
        latest = self._latest_version(ctx)
        if latest and self.installed_version(ctx) == latest:
            return f"Go {latest} already installed"
        return None

    def missing_precondition(self, ctx: RunContext) -> str | None:
        return missing_commands("curl", "tar")

    def apply(self, ctx: RunContext) -> None:
        console.msg("Installing Go...")
        version = self._latest_version(ctx)
        if not version:
            raise StepError("Failed to determine latest Go version.")

        go_root = Path(ctx.settings.go_root)
        url = ctx.settings.go_download_url.format(version=version)

        with staging_area(prefix="desksetup-go-") as staging:
            archive = fetch_to_file(url, staging / url.rsplit("/", 1)[-1])
            if go_root.exists():
                shutil.rmtree(go_root)
            run_command(["tar", "-C", str(go_root.parent), "-xzf", str(archive)])

        profile = ctx.user_home / ".profile"
        if ensure_line(profile, f"export PATH=$PATH:{go_root}/bin", marker=f"{go_root}/bin"):
            chown_tree(profile, ctx.uid, ctx.gid)


class InstallVSCode(ProvisionAction):
    description = "Install VS Code from Microsoft's apt repository"

    def already_done(self, ctx: RunContext) -> str | None:
        if command_exists("code"):
            return "VS Code already installed"
        return None

    def missing_precondition(self, ctx: RunContext) -> str | None:
        return missing_commands("curl", "gpg", "apt-get")

    def apply(self, ctx: RunContext) -> None:
        console.msg("Installing VS Code...")
        settings = ctx.settings

        key = fetch_text(settings.vscode_key_url)
        try:
            run_command(
                ["gpg", "--dearmor", "--yes", "-o", settings.vscode_keyring],
                input_text=key,
            )
        except CommandError as e:
            raise StepError(f"Failed to add Microsoft GPG key: {e}") from e

        source_list = Path(settings.vscode_source_list)
        source_list.parent.mkdir(parents=True, exist_ok=True)
        source_list.write_text(
            f"deb [arch=amd64 signed-by={settings.vscode_keyring}] {settings.vscode_repo}\n"
        )

        try:
            apt_get("update", "-qq")
        except CommandError as e:
            raise StepError(f"Failed to update apt after adding VS Code repo: {e}") from e
        apt_get("install", "-y", "-qq", "code")


class InstallStarship(ProvisionAction):
    description = "Install the Starship prompt"

    def already_done(self, ctx: RunContext) -> str | None:
        if command_exists("starship"):
            return "Starship already installed"
        return None

    def missing_precondition(self, ctx: RunContext) -> str | None:
        return missing_commands("curl", "sh")

    def apply(self, ctx: RunContext) -> None:
        console.msg("Installing Starship prompt...")
        script = fetch_text(ctx.settings.starship_install_url)
        run_command(["sh", "-s", "--", "-y"], input_text=script)
