"""Sync orchestration: resolve -> validate -> rsync, one disk or all."""

from __future__ import annotations

import enum
import functools
import logging
import threading
from concurrent.futures import Future
from typing import Callable, Optional, Protocol

from pydantic import BaseModel

from ..config import Settings, SettingsStore
from ..disks import Disk, DiskProvider
from .errors import (
    DirectoryNotValid,
    SyncError,
    SyncFailure,
    SyncReason,
    VolumeNameNotFound,
)
from .paths import is_usable_directory, mount_path, resolve_backup_path
from .rsync import OnComplete, Response, TransferJob, invoke_mirror

logger = logging.getLogger(__name__)


class Invoke(Protocol):
    def __call__(
        self,
        source: str,
        destination: str,
        on_complete: OnComplete | None = None,
        rsync_path: str = "rsync",
    ) -> TransferJob: ...


Dispatch = Callable[[Callable[[], None]], None]
OnError = Callable[[Disk, SyncError], None]


class Direction(str, enum.Enum):
    BACKUP = "backup"
    RESTORE = "restore"


class SyncResult(BaseModel):
    """Outcome of one disk within a batch."""

    disk_name: str
    direction: Direction
    source: Optional[str] = None
    destination: Optional[str] = None
    skipped: Optional[SyncReason] = None
    response: Optional[Response] = None
    failure: Optional[SyncFailure] = None


class BatchReport:
    """Per-disk results of a batch, complete once ``finished`` is set."""

    def __init__(self, direction: Direction) -> None:
        self.direction = direction
        self._results: dict[int, SyncResult] = {}
        self._lock = threading.Lock()
        self._finished = threading.Event()

    def record(self, index: int, result: SyncResult) -> None:
        with self._lock:
            self._results[index] = result

    @property
    def results(self) -> list[SyncResult]:
        """Results in disk order."""
        with self._lock:
            return [self._results[i] for i in sorted(self._results)]

    @property
    def finished(self) -> bool:
        return self._finished.is_set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until every started transfer has exited."""
        return self._finished.wait(timeout)

    def _finish(self) -> None:
        self._finished.set()


class _FanIn:
    """Counts outstanding transfers and fires once when none remain.

    Starts with one unit held for the enumeration itself, so a
    transfer finishing before the last one is started cannot fire
    the callback early. ``seal`` releases that unit.
    """

    def __init__(self, on_done: Callable[[], None]) -> None:
        self._pending = 1
        self._lock = threading.Lock()
        self._on_done = on_done

    def enter(self) -> None:
        with self._lock:
            self._pending += 1

    def leave(self) -> None:
        with self._lock:
            self._pending -= 1
            done = self._pending == 0
        if done:
            self._on_done()

    def seal(self) -> None:
        self.leave()


def _call_inline(fn: Callable[[], None]) -> None:
    fn()


class SyncOrchestrator:
    """Backs up RAM disks to the sync root and restores them from it.

    Settings and the disk list are read afresh on every call, so a
    renamed disk or a new sync root takes effect immediately.

    Batch completion callbacks run through ``dispatch``. The default
    runs them inline: on the calling thread when no transfer was
    started, otherwise on the watcher thread of the transfer that
    finished last. GUI callers pass their loop's call-soon here.
    """

    def __init__(
        self,
        settings: SettingsStore,
        disks: DiskProvider,
        invoke: Invoke = invoke_mirror,
        dispatch: Dispatch | None = None,
    ) -> None:
        self._settings = settings
        self._disks = disks
        self._invoke = invoke
        self._dispatch = dispatch or _call_inline

    def backup_path(self, disk: Disk) -> str | None:
        """The disk's backup folder, or None without a sync root."""
        return resolve_backup_path(disk.name, self._settings.get_sync_root())

    def restore_one(
        self, disk: Disk, on_complete: OnComplete | None = None
    ) -> TransferJob | None:
        """Mirror the disk's backup folder onto its mounted volume.

        Returns None without touching anything when no sync root is
        set or the disk was never backed up.
        """
        return self._run_one(disk, Direction.RESTORE, on_complete)

    def backup_one(
        self, disk: Disk, on_complete: OnComplete | None = None
    ) -> TransferJob | None:
        """Mirror the disk's mounted volume into its backup folder.

        Anything in the backup folder that is no longer on the disk
        is deleted. Returns None when no sync root is set or the
        backup folder does not exist.
        """
        return self._run_one(disk, Direction.BACKUP, on_complete)

    def backup_all(
        self,
        on_complete: Callable[[BatchReport], None] | None = None,
        on_error: OnError | None = None,
        only: list[str] | None = None,
    ) -> BatchReport:
        """Back up every disk in parallel.

        A disk failing its preconditions is reported through
        ``on_error`` and skipped; the others still run.
        ``on_complete`` fires exactly once, after the last transfer
        exits, even when none were started.
        """
        return self._run_batch(Direction.BACKUP, on_complete, on_error, only)

    def restore_all(
        self,
        on_complete: Callable[[BatchReport], None] | None = None,
        on_error: OnError | None = None,
        only: list[str] | None = None,
    ) -> BatchReport:
        """Restore every disk from its backup folder in parallel."""
        return self._run_batch(Direction.RESTORE, on_complete, on_error, only)

    def _run_one(
        self,
        disk: Disk,
        direction: Direction,
        on_complete: OnComplete | None,
    ) -> TransferJob | None:
        settings = self._settings.get_settings()
        plan = self._prepare(disk, settings, direction)
        if isinstance(plan, SyncReason):
            logger.debug(
                "Nothing to %s for disk '%s': %s",
                direction.value,
                disk.name,
                plan.value,
            )
            return None
        else:
            source, destination = plan
            return self._invoke(
                source,
                destination,
                on_complete=on_complete,
                rsync_path=settings.rsync_path,
            )

    def _prepare(
        self, disk: Disk, settings: Settings, direction: Direction
    ) -> tuple[str, str] | SyncReason:
        """Validate both sides and return (source, destination).

        Returns a reason when there is nothing to do and raises
        ``SyncError`` when the disk itself is not usable.
        """
        folder = resolve_backup_path(disk.name, settings.sync_root)
        if folder is None:
            return SyncReason.NOT_CONFIGURED
        elif not is_usable_directory(folder):
            return SyncReason.BACKUP_FOLDER_MISSING
        else:
            live = self._live_mount(disk, settings)
            match direction:
                case Direction.BACKUP:
                    return live, folder
                case Direction.RESTORE:
                    return folder, live

    def _live_mount(self, disk: Disk, settings: Settings) -> str:
        if disk.volume_name is None:
            raise VolumeNameNotFound(disk.name)
        else:
            path = mount_path(disk.volume_name, settings.volumes_root)
            if not is_usable_directory(path):
                raise DirectoryNotValid(path)
            return path

    def _run_batch(
        self,
        direction: Direction,
        on_complete: Callable[[BatchReport], None] | None,
        on_error: OnError | None,
        only: list[str] | None,
    ) -> BatchReport:
        settings = self._settings.get_settings()
        disks = [
            d
            for d in self._disks.mounted_disks()
            if not only or d.name in only
        ]
        report = BatchReport(direction)

        def finish() -> None:
            report._finish()
            logger.info(
                "%s of %d disk(s) finished", direction.value, len(disks)
            )
            if on_complete is not None:
                self._dispatch(lambda: on_complete(report))

        fan_in = _FanIn(finish)
        try:
            for index, disk in enumerate(disks):
                self._start(
                    index, disk, settings, direction, report, fan_in, on_error
                )
        finally:
            fan_in.seal()
        return report

    def _start(
        self,
        index: int,
        disk: Disk,
        settings: Settings,
        direction: Direction,
        report: BatchReport,
        fan_in: _FanIn,
        on_error: OnError | None,
    ) -> None:
        try:
            plan = self._prepare(disk, settings, direction)
        except SyncError as e:
            logger.warning(
                "Cannot %s disk '%s': %s", direction.value, disk.name, e
            )
            report.record(
                index,
                SyncResult(
                    disk_name=disk.name,
                    direction=direction,
                    failure=e.to_failure(),
                ),
            )
            if on_error is not None:
                try:
                    on_error(disk, e)
                except Exception:
                    logger.exception(
                        "Error handler failed for disk '%s'", disk.name
                    )
            return

        if isinstance(plan, SyncReason):
            logger.info(
                "Skipping %s of disk '%s': %s",
                direction.value,
                disk.name,
                plan.value,
            )
            report.record(
                index,
                SyncResult(
                    disk_name=disk.name, direction=direction, skipped=plan
                ),
            )
            return

        source, destination = plan
        fan_in.enter()
        try:
            job = self._invoke(
                source, destination, rsync_path=settings.rsync_path
            )
        except OSError as e:
            fan_in.leave()
            logger.error("Cannot start rsync for disk '%s': %s", disk.name, e)
            report.record(
                index,
                SyncResult(
                    disk_name=disk.name,
                    direction=direction,
                    source=source,
                    destination=destination,
                    failure=SyncFailure(
                        reason=SyncReason.TRANSFER_FAILED, message=str(e)
                    ),
                ),
            )
            return

        job.future.add_done_callback(
            functools.partial(
                self._on_job_done,
                report,
                fan_in,
                index,
                SyncResult(
                    disk_name=disk.name,
                    direction=direction,
                    source=job.source,
                    destination=job.destination,
                ),
            )
        )

    @staticmethod
    def _on_job_done(
        report: BatchReport,
        fan_in: _FanIn,
        index: int,
        pending: SyncResult,
        future: Future[Response],
    ) -> None:
        try:
            error = future.exception()
            if error is None:
                response = future.result()
                result = pending.model_copy(update={"response": response})
            else:
                failure = SyncFailure(
                    reason=SyncReason.TRANSFER_FAILED, message=str(error)
                )
                result = pending.model_copy(update={"failure": failure})
            report.record(index, result)
        finally:
            fan_in.leave()
