"""Settings loading and validation.

Everything a step needs that is plain data (URLs, install locations, sizes,
names) lives in Settings. Defaults reproduce the stock i3/gruvbox setup; a
YAML file can override any of them.
"""

import logging
from dataclasses import dataclass, fields, replace
from pathlib import Path

import yaml

from .errors import DesksetupError, format_field_error
from .paths import get_config_path

_logging = logging.getLogger(__name__)


class ConfigError(DesksetupError):
    """Raised when settings loading or validation fails."""


@dataclass(frozen=True)
class Settings:
    """Inert configuration data consumed by the provisioning steps."""

    programs_url: str = (
        "https://raw.githubusercontent.com/jimbarrett/ubuntu-i3-setup/main/programs.csv"
    )
    configs_repo: str = "https://github.com/jimbarrett/ubuntu-i3-configs.git"
    nerd_font_url: str = (
        "https://github.com/ryanoasis/nerd-fonts/releases/latest/download/Hack.zip"
    )
    nerd_font_dir: str = ".local/share/fonts/HackNerdFont"
    go_version_url: str = "https://go.dev/VERSION?m=text"
    go_download_url: str = "https://go.dev/dl/{version}.linux-amd64.tar.gz"
    go_root: str = "/usr/local/go"
    nvm_install_url: str = (
        "https://raw.githubusercontent.com/nvm-sh/nvm/master/install.sh"
    )
    starship_install_url: str = "https://starship.rs/install.sh"
    vscode_key_url: str = "https://packages.microsoft.com/keys/microsoft.asc"
    vscode_keyring: str = "/usr/share/keyrings/microsoft-archive-keyring.gpg"
    vscode_source_list: str = "/etc/apt/sources.list.d/vscode.list"
    vscode_repo: str = "https://packages.microsoft.com/repos/vscode stable main"
    cursor_size: int = 24
    shell: str = "zsh"
    expected_distro: str = "Ubuntu"
    display_manager: str = "lightdm"
    competing_display_manager: str = "gdm3"


def validate_settings(data: dict) -> Settings:
    """Validate and convert a raw mapping to Settings.

    Args:
        data: Raw dict from yaml.safe_load() holding overrides

    Returns:
        Settings with the overrides applied on top of the defaults

    Raises:
        ConfigError: If a key is unknown or a value has the wrong type
    """
    if not isinstance(data, dict):
        raise ConfigError(f"Config must be a mapping, got {type(data).__name__}")

    known = {f.name: f for f in fields(Settings)}
    overrides = {}
    for key, value in data.items():
        if key not in known:
            raise ConfigError(f"Unknown config key: {key}")

        expected = int if known[key].type in (int, "int") else str
        # bool is an int subclass, reject it explicitly
        if isinstance(value, bool) or not isinstance(value, expected):
            raise ConfigError(
                format_field_error(
                    "Config", key, f"must be a {expected.__name__}, got {type(value).__name__}"
                )
            )
        if expected is str and not value.strip():
            raise ConfigError(format_field_error("Config", key, "must be a non-empty string"))
        if expected is int and value <= 0:
            raise ConfigError(format_field_error("Config", key, "must be positive"))
        overrides[key] = value

    if "go_download_url" in overrides and "{version}" not in overrides["go_download_url"]:
        raise ConfigError(
            format_field_error("Config", "go_download_url", "must contain '{version}'")
        )

    return replace(Settings(), **overrides)


def load_settings(path: Path | str | None = None) -> Settings:
    """Load settings from a YAML file, falling back to defaults.

    Args:
        path: Explicit file path; when None the usual lookup applies

    Returns:
        Validated Settings

    Raises:
        ConfigError: If the file cannot be read, parsed, or validated
    """
    config_path = get_config_path(path)
    if config_path is None:
        _logging.debug("No config file found, using built-in defaults")
        return Settings()

    try:
        text = config_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ConfigError(f"Config file not found: {config_path}")
    except PermissionError:
        raise ConfigError(f"Permission denied reading config file: {config_path}")
    except UnicodeDecodeError:
        raise ConfigError(f"Config file is not valid UTF-8: {config_path}")
    except OSError as e:
        raise ConfigError(f"Error reading config file {config_path}: {e}")

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(f"Config syntax error in {config_path}: {e}") from e

    if data is None:
        return Settings()

    _logging.debug(f"Loaded config overrides from {config_path}")
    return validate_settings(data)


__all__ = [
    "ConfigError",
    "Settings",
    "validate_settings",
    "load_settings",
]
