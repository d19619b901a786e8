"""Runtime status of disks: can they be backed up right now."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, computed_field

from .config import Settings
from .disks import Disk
from .sync.errors import SyncReason
from .sync.paths import is_usable_directory, mount_path, resolve_backup_path


class DiskStatus(BaseModel):
    """Runtime status of one disk."""

    disk: Disk
    mount_path: Optional[str] = None
    backup_path: Optional[str] = None
    reasons: list[SyncReason]

    @computed_field  # type: ignore[prop-decorator]
    @property
    def active(self) -> bool:
        return len(self.reasons) == 0


def check_disk(disk: Disk, settings: Settings) -> DiskStatus:
    """Check a disk, accumulating every reason it cannot be synced."""
    reasons: list[SyncReason] = []

    backup = resolve_backup_path(disk.name, settings.sync_root)
    if backup is None:
        reasons.append(SyncReason.NOT_CONFIGURED)
    elif not is_usable_directory(backup):
        reasons.append(SyncReason.BACKUP_FOLDER_MISSING)

    live: str | None = None
    if disk.volume_name is None:
        reasons.append(SyncReason.VOLUME_NAME_NOT_FOUND)
    else:
        live = mount_path(disk.volume_name, settings.volumes_root)
        if not is_usable_directory(live):
            reasons.append(SyncReason.DIRECTORY_NOT_VALID)

    return DiskStatus(
        disk=disk,
        mount_path=live,
        backup_path=backup,
        reasons=reasons,
    )


def check_all_disks(
    disks: list[Disk], settings: Settings
) -> dict[str, DiskStatus]:
    """Check every disk, keyed by disk name."""
    return {disk.name: check_disk(disk, settings) for disk in disks}
