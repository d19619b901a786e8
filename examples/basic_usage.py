#!/usr/bin/env python3
"""
Basic usage example for ramsync.

Needs rsync on PATH. Uses temporary folders in place of /Volumes.
"""

import shutil
import tempfile
from pathlib import Path

from ramsync.config import DiskSpec, MemorySettingsStore, Settings
from ramsync.disks import ConfiguredDiskProvider
from ramsync.sync import SyncOrchestrator
from ramsync.sync.outcome import result_failure


def main():
    """Back up a fake RAM disk, lose it, and restore it."""
    print("ramsync - Basic Usage Example")
    print("=" * 50)

    if shutil.which("rsync") is None:
        print("rsync not found on PATH")
        return

    with tempfile.TemporaryDirectory() as temp_dir:
        temp_path = Path(temp_dir)

        volumes = temp_path / "Volumes"
        volume = volumes / "Scratch"
        volume.mkdir(parents=True)
        (volume / "notes.txt").write_text("kept across reboots")
        (volume / "build").mkdir()
        (volume / "build" / "output.bin").write_bytes(b"\x00" * 128)

        sync_root = temp_path / "sync"
        # The backup folder must exist for a disk to be backed up.
        (sync_root / "scratch").mkdir(parents=True)

        store = MemorySettingsStore(
            Settings(
                sync_root=str(sync_root),
                volumes_root=str(volumes),
                disks=[DiskSpec(name="Scratch")],
            )
        )
        orchestrator = SyncOrchestrator(store, ConfiguredDiskProvider(store))

        # 1. Back up every disk and wait for the fan-in
        print("1. Backing up...")
        report = orchestrator.backup_all()
        report.wait()
        for result in report.results:
            failure = result_failure(result)
            status = failure.message if failure else "OK"
            print(f"   {result.disk_name}: {status}")

        # 2. Simulate a reboot: the RAM disk comes back empty
        print("2. Wiping the volume...")
        shutil.rmtree(volume)
        volume.mkdir()

        # 3. Restore from the backup folder
        print("3. Restoring...")
        report = orchestrator.restore_all()
        report.wait()
        restored = sorted(
            str(p.relative_to(volume)) for p in volume.rglob("*")
        )
        print(f"   Restored: {restored}")


if __name__ == "__main__":
    main()
