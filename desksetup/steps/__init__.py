"""Provisioning steps, in the order they run."""

from desksetup.engine import Step

from .display import ConfigureDisplayManager, DisableAutorandr, DisableSystemBeep
from .fonts import InstallNerdFont, RebuildFontCache
from .home import ConfigureCursor, DeployDotfiles, SetLoginShell
from .system import InstallPackages, SystemUpdate
from .tooling import InstallGo, InstallNvm, InstallStarship, InstallVSCode


def build_steps() -> list[Step]:
    """Return a fresh step list for one run."""
    return [
        Step("system update", SystemUpdate()),
        Step("packages", InstallPackages()),
        Step("lightdm config", ConfigureDisplayManager()),
        Step("dotfiles", DeployDotfiles()),
        Step("Hack Nerd Font", InstallNerdFont()),
        Step("nvm", InstallNvm()),
        Step("Go", InstallGo()),
        Step("VS Code", InstallVSCode()),
        Step("Starship prompt", InstallStarship()),
        Step("cursor config", ConfigureCursor()),
        Step("set zsh shell", SetLoginShell()),
        Step("autorandr service", DisableAutorandr()),
        Step("system beep", DisableSystemBeep()),
        Step("font cache", RebuildFontCache()),
    ]


__all__ = [
    "build_steps",
    "SystemUpdate",
    "InstallPackages",
    "ConfigureDisplayManager",
    "DeployDotfiles",
    "InstallNerdFont",
    "InstallNvm",
    "InstallGo",
    "InstallVSCode",
    "InstallStarship",
    "ConfigureCursor",
    "SetLoginShell",
    "DisableAutorandr",
    "DisableSystemBeep",
    "RebuildFontCache",
]
