"""Font installation steps."""

import logging
import zipfile

from desksetup import console
from desksetup.engine import ProvisionAction, RunContext
from desksetup.errors import StepError
from desksetup.execution import as_user, fetch_to_file, missing_commands, run_command
from desksetup.fsutil import chown_tree
from desksetup.staging import staging_area

_logging = logging.getLogger(__name__)


class InstallNerdFont(ProvisionAction):
    description = "Install Hack Nerd Font for the user"

    def already_done(self, ctx: RunContext) -> str | None:
        font_dir = ctx.user_home / ctx.settings.nerd_font_dir
        if font_dir.is_dir() and any(font_dir.glob("*.ttf")):
            return "Hack Nerd Font already present"
        return None

    def missing_precondition(self, ctx: RunContext) -> str | None:
        return missing_commands("curl")

    def apply(self, ctx: RunContext) -> None:
        console.msg("Installing Hack Nerd Font...")
        font_dir = ctx.user_home / ctx.settings.nerd_font_dir
        font_dir.mkdir(parents=True, exist_ok=True)

        with staging_area(prefix="desksetup-font-") as staging:
            archive = fetch_to_file(ctx.settings.nerd_font_url, staging / "Hack.zip")
            try:
                with zipfile.ZipFile(archive) as zf:
                    zf.extractall(font_dir)
            except zipfile.BadZipFile as e:
                raise StepError(f"Failed to unzip Hack Nerd Font: {e}") from e

        chown_tree(font_dir, ctx.uid, ctx.gid)


class RebuildFontCache(ProvisionAction):
    description = "Rebuild the user's font cache"

    def missing_precondition(self, ctx: RunContext) -> str | None:
        return missing_commands("fc-cache")

    def apply(self, ctx: RunContext) -> None:
        console.msg("Rebuilding font cache...")
        run_command(as_user(ctx.username, ["fc-cache", "-f"]))
