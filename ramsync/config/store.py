"""Key-value access to persisted settings."""

from __future__ import annotations

import logging
import os
import threading
from pathlib import Path
from typing import Protocol

from ..sync.errors import DirectoryNotValid
from ..sync.paths import is_usable_directory
from .loader import ConfigError, dump_settings, parse_settings
from .protocol import Settings

logger = logging.getLogger(__name__)


class SettingsStore(Protocol):
    """Get/set access to the settings the sync engine reads."""

    def get_settings(self) -> Settings: ...

    def get_sync_root(self) -> str: ...

    def set_sync_root(self, path: str) -> None: ...

    def get_auto_recreate(self) -> bool: ...

    def set_auto_recreate(self, enabled: bool) -> None: ...


class MemorySettingsStore:
    """Settings held in process memory."""

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or Settings()
        self._lock = threading.Lock()

    def get_settings(self) -> Settings:
        with self._lock:
            return self._settings

    def _update(self, **changes: object) -> None:
        with self._lock:
            self._commit(self._settings.model_copy(update=changes))

    def _commit(self, settings: Settings) -> None:
        self._settings = settings

    def get_sync_root(self) -> str:
        return self.get_settings().sync_root

    def set_sync_root(self, path: str) -> None:
        self._update(sync_root=path)

    def get_auto_recreate(self) -> bool:
        return self.get_settings().auto_recreate_disks

    def set_auto_recreate(self, enabled: bool) -> None:
        self._update(auto_recreate_disks=enabled)


class YamlSettingsStore(MemorySettingsStore):
    """Settings persisted to a YAML file.

    The file is read once at construction; every setter writes
    the whole document back. A failed write leaves the settings
    unchanged.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        if path.is_file():
            settings = parse_settings(
                path.read_text(encoding="utf-8"), str(path)
            )
        else:
            settings = Settings()
        super().__init__(settings)

    def _commit(self, settings: Settings) -> None:
        self._save(settings)
        self._settings = settings

    def _save(self, settings: Settings) -> None:
        text = dump_settings(settings)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp = self.path.with_suffix(self.path.suffix + ".tmp")
            tmp.write_text(text, encoding="utf-8")
            os.replace(tmp, self.path)
        except OSError as e:
            raise ConfigError(
                f"Cannot write settings to {self.path}: {e}"
            ) from e
        logger.debug("Saved settings to %s", self.path)


def choose_sync_root(store: SettingsStore, path: str) -> str:
    """Validate and store the folder disks are mirrored into.

    Returns the absolute path that was stored.
    """
    absolute = os.path.abspath(os.path.expanduser(path))
    if not is_usable_directory(absolute):
        raise DirectoryNotValid(absolute)
    else:
        store.set_sync_root(absolute)
        logger.info("Sync root set to %s", absolute)
        return absolute
