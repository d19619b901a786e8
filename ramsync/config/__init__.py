"""Settings types, loading, and storage."""

from .loader import (
    ConfigError,
    default_settings_path,
    dump_settings,
    find_settings_file,
    load_settings,
    parse_settings,
)
from .protocol import DiskSpec, Settings
from .store import (
    MemorySettingsStore,
    SettingsStore,
    YamlSettingsStore,
    choose_sync_root,
)

__all__ = [
    "ConfigError",
    "DiskSpec",
    "MemorySettingsStore",
    "Settings",
    "SettingsStore",
    "YamlSettingsStore",
    "choose_sync_root",
    "default_settings_path",
    "dump_settings",
    "find_settings_file",
    "load_settings",
    "parse_settings",
]
