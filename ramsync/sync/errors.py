"""Sync failure types."""

from __future__ import annotations

import enum

from pydantic import BaseModel


class SyncReason(str, enum.Enum):
    NOT_CONFIGURED = "sync folder not configured"
    BACKUP_FOLDER_MISSING = "backup folder missing"
    VOLUME_NAME_NOT_FOUND = "volume name not found"
    DIRECTORY_NOT_VALID = "directory not valid"
    TRANSFER_FAILED = "transfer failed"


class SyncFailure(BaseModel):
    """A sync failure as a plain value."""

    reason: SyncReason
    message: str
    path: str | None = None


class SyncError(Exception):
    """Base class for precondition failures raised before rsync starts."""

    reason: SyncReason

    def to_failure(self) -> SyncFailure:
        return SyncFailure(reason=self.reason, message=str(self))


class VolumeNameNotFound(SyncError):
    """The disk has no mounted volume name."""

    reason = SyncReason.VOLUME_NAME_NOT_FOUND

    def __init__(self, disk_name: str) -> None:
        super().__init__(f"Volume name not found for disk '{disk_name}'")
        self.disk_name = disk_name


class DirectoryNotValid(SyncError):
    """A path that must be a directory is missing or is not one."""

    reason = SyncReason.DIRECTORY_NOT_VALID

    def __init__(self, path: str) -> None:
        super().__init__(f"{path} not valid")
        self.path = path

    def to_failure(self) -> SyncFailure:
        return SyncFailure(
            reason=self.reason, message=str(self), path=self.path
        )
