"""Backup folder resolution and directory validation."""

from __future__ import annotations

import os

from .slug import slugify

DEFAULT_VOLUMES_ROOT = "/Volumes"


def resolve_backup_path(disk_name: str, sync_root: str) -> str | None:
    """Return the backup folder for a disk, or None if unconfigured.

    The result always ends with a separator so rsync mirrors the
    folder contents rather than the folder itself. No filesystem
    access happens here.
    """
    if sync_root == "":
        return None
    else:
        return f"{sync_root}/{slugify(disk_name)}/"


def mount_path(
    volume_name: str, volumes_root: str = DEFAULT_VOLUMES_ROOT
) -> str:
    """Return the live mount point of a volume."""
    return f"{volumes_root}/{volume_name}/"


def is_usable_directory(path: str) -> bool:
    """True if path exists and is a directory.

    A regular file at path is rejected the same way as a missing path.
    """
    return os.path.isdir(path)
