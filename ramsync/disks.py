"""Disk descriptors and the providers that list mounted disks."""

from __future__ import annotations

import logging
from typing import Optional, Protocol

from pydantic import BaseModel, ConfigDict, Field

from .config import SettingsStore
from .sync.paths import is_usable_directory, mount_path

logger = logging.getLogger(__name__)


class Disk(BaseModel):
    """A RAM disk as seen by the sync engine.

    ``volume_name`` is None while the disk is not mounted.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    volume_name: Optional[str] = None
    capacity: int = Field(default=0, ge=0)


class DiskProvider(Protocol):
    def mounted_disks(self) -> list[Disk]: ...


class StaticDiskProvider:
    """A fixed list of disks."""

    def __init__(self, disks: list[Disk]) -> None:
        self._disks = list(disks)

    def mounted_disks(self) -> list[Disk]:
        return list(self._disks)


class ConfiguredDiskProvider:
    """Disks from the persisted disk setup.

    A disk only gets a volume name when its mount point currently
    exists under the configured volumes root.
    """

    def __init__(self, store: SettingsStore) -> None:
        self._store = store

    def mounted_disks(self) -> list[Disk]:
        settings = self._store.get_settings()
        disks: list[Disk] = []
        for spec in settings.disks:
            volume_name = spec.volume_name
            if volume_name is not None and not is_usable_directory(
                mount_path(volume_name, settings.volumes_root)
            ):
                logger.debug(
                    "Disk '%s' is not mounted at %s",
                    spec.name,
                    mount_path(volume_name, settings.volumes_root),
                )
                volume_name = None
            disks.append(
                Disk(
                    name=spec.name,
                    volume_name=volume_name,
                    capacity=spec.capacity,
                )
            )
        return disks
