"""YAML settings loading, parsing, and validation."""

from __future__ import annotations

import os
from pathlib import Path

import yaml

from .protocol import Settings


class ConfigError(Exception):
    """Raised when settings are invalid."""


def default_settings_path() -> Path:
    """Return the per-user settings location."""
    xdg = os.environ.get(
        "XDG_CONFIG_HOME",
        os.path.expanduser("~/.config"),
    )
    return Path(xdg) / "ramsync" / "settings.yaml"


def find_settings_file(settings_path: str | None = None) -> Path | None:
    """Find the settings file using search order.

    Order: explicit path > XDG_CONFIG_HOME > /etc/ramsync/.
    Returns None when no file exists yet and no explicit path
    was given.
    """
    if settings_path is not None:
        p = Path(settings_path)
        if not p.is_file():
            raise ConfigError(f"Settings file not found: {settings_path}")
        else:
            return p
    else:
        xdg_path = default_settings_path()
        etc_path = Path("/etc/ramsync/settings.yaml")
        if xdg_path.is_file():
            return xdg_path
        elif etc_path.is_file():
            return etc_path
        else:
            return None


def parse_settings(text: str, source: str = "<string>") -> Settings:
    """Parse and validate settings from YAML text."""
    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {source}: {e}") from e

    if raw is None:
        return Settings()
    elif not isinstance(raw, dict):
        raise ConfigError("Settings file must be a YAML mapping")
    else:
        try:
            return Settings.model_validate(raw)
        except Exception as e:
            raise ConfigError(str(e)) from e


def load_settings(settings_path: str | None = None) -> Settings:
    """Load settings, falling back to defaults when no file exists."""
    path = find_settings_file(settings_path)
    if path is None:
        return Settings()
    else:
        return parse_settings(path.read_text(encoding="utf-8"), str(path))


def dump_settings(settings: Settings) -> str:
    """Serialize settings to YAML using the file's kebab-case keys."""
    return yaml.safe_dump(
        settings.model_dump(by_alias=True),
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
    )
