"""Steps that configure the target user's home and login shell."""

import logging
import pwd
import shutil

from desksetup import console
from desksetup.engine import ProvisionAction, RunContext
from desksetup.errors import StepError
from desksetup.execution import as_user, missing_commands, probe_command, run_command
from desksetup.fsutil import (
    chown_paths,
    copy_tree,
    ensure_line,
    make_executable,
    remove_path,
)
from desksetup.staging import staging_area

# Repository files that are not dotfiles
REPO_ONLY = (".git", "README.md", "LICENSE")
OWNED_PATHS = (".config", ".local", ".Xresources", ".xinitrc", ".screenlayout")

_logging = logging.getLogger(__name__)


class DeployDotfiles(ProvisionAction):
    description = "Copy the dotfiles repository over the user's home"

    def missing_precondition(self, ctx: RunContext) -> str | None:
        return missing_commands("git")

    def apply(self, ctx: RunContext) -> None:
        console.msg("Deploying dotfiles...")
        home = ctx.user_home

        with staging_area(prefix="desksetup-dotfiles-") as staging:
            checkout = staging / "configs"
            run_command(
                ["git", "clone", "--depth", "1", ctx.settings.configs_repo, str(checkout)]
            )
            for name in REPO_ONLY:
                remove_path(checkout / name)
            copy_tree(checkout, home)

        blocks = home / ".local" / "bin" / "i3blocks"
        if blocks.is_dir():
            for script in blocks.iterdir():
                if script.is_file():
                    make_executable(script)
        xinitrc = home / ".xinitrc"
        if xinitrc.is_file():
            make_executable(xinitrc)

        (home / ".screenlayout").mkdir(exist_ok=True)
        chown_paths((home / name for name in OWNED_PATHS), ctx.uid, ctx.gid)
        console.msg("Dotfiles deployed.")


class ConfigureCursor(ProvisionAction):
    description = "Set the X cursor size"

    def apply(self, ctx: RunContext) -> None:
        console.msg("Configuring cursor size...")
        size = ctx.settings.cursor_size
        xresources = ctx.user_home / ".Xresources"
        profile = ctx.user_home / ".profile"

        ensure_line(xresources, f"Xcursor.size: {size}", marker="Xcursor.size")
        ensure_line(profile, f"export XCURSOR_SIZE={size}", marker="XCURSOR_SIZE")

        if shutil.which("gsettings"):
            argv = as_user(
                ctx.username,
                ["gsettings", "set", "org.gnome.desktop.interface", "cursor-size", str(size)],
            )
            if probe_command(argv) is None:
                _logging.info("gsettings could not set the cursor size (no session bus?)")

        chown_paths([xresources, profile], ctx.uid, ctx.gid)


class SetLoginShell(ProvisionAction):
    description = "Make zsh the user's login shell"

    def _shell_paths(self, ctx: RunContext) -> set[str]:
        shell = ctx.settings.shell
        return {f"/usr/bin/{shell}", f"/bin/{shell}"}

    def already_done(self, ctx: RunContext) -> str | None:
        try:
            current = pwd.getpwnam(ctx.username).pw_shell
        except KeyError:
            return None
        if current in self._shell_paths(ctx):
            return f"{ctx.settings.shell} is already the default shell"
        return None

    def missing_precondition(self, ctx: RunContext) -> str | None:
        if not shutil.which(ctx.settings.shell):
            return f"{ctx.settings.shell} not found"
        return None

    def apply(self, ctx: RunContext) -> None:
        shell = ctx.settings.shell
        path = shutil.which(shell)
        if not path:
            raise StepError(f"{shell} not found")
        console.msg(f"Setting default shell to {shell}...")
        run_command(["chsh", "-s", path, ctx.username])
