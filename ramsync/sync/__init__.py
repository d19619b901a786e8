"""Sync orchestration and rsync mirror invocation."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .errors import DirectoryNotValid as DirectoryNotValid
from .errors import SyncError as SyncError
from .errors import SyncFailure as SyncFailure
from .errors import SyncReason as SyncReason
from .errors import VolumeNameNotFound as VolumeNameNotFound
from .paths import is_usable_directory as is_usable_directory
from .paths import resolve_backup_path as resolve_backup_path
from .slug import slugify as slugify

if TYPE_CHECKING:
    from .runner import BatchReport as BatchReport
    from .runner import Direction as Direction
    from .runner import SyncOrchestrator as SyncOrchestrator
    from .runner import SyncResult as SyncResult

__all__ = [
    "BatchReport",
    "Direction",
    "DirectoryNotValid",
    "SyncError",
    "SyncFailure",
    "SyncOrchestrator",
    "SyncReason",
    "SyncResult",
    "VolumeNameNotFound",
    "is_usable_directory",
    "resolve_backup_path",
    "slugify",
]


def __getattr__(name: str) -> object:
    if name in __all__:
        from . import runner

        globals().update(
            {
                "BatchReport": runner.BatchReport,
                "Direction": runner.Direction,
                "SyncOrchestrator": runner.SyncOrchestrator,
                "SyncResult": runner.SyncResult,
            }
        )
        return globals()[name]
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
