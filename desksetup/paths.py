"""Configuration path helpers for desksetup."""

import os
from pathlib import Path

CONFIG_ENV_VAR = "DESKSETUP_CONFIG"


def get_config_dir() -> Path:
    """Return XDG-compliant config directory: ~/.config/desksetup"""
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "desksetup"
    return Path.home() / ".config" / "desksetup"


def get_config_path(explicit: str | Path | None = None) -> Path | None:
    """Return path to the settings override file, if one applies.

    Priority:
    1. explicit path (the --config option)
    2. DESKSETUP_CONFIG environment variable (if set)
    3. ~/.config/desksetup/config.yaml, when it exists

    Args:
        explicit: Path given on the command line

    Returns:
        Path to config file, or None when the built-in defaults apply
    """
    if explicit:
        return Path(explicit)

    if os.environ.get(CONFIG_ENV_VAR):
        return Path(os.environ[CONFIG_ENV_VAR])

    default_path = get_config_dir() / "config.yaml"
    if default_path.is_file():
        return default_path
    return None
