"""Tests for ramsync.disks."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from ramsync.config import DiskSpec, MemorySettingsStore, Settings
from ramsync.disks import ConfiguredDiskProvider, Disk, StaticDiskProvider


class TestDisk:
    def test_frozen(self) -> None:
        disk = Disk(name="Scratch", volume_name="Scratch", capacity=1)
        with pytest.raises(ValidationError):
            disk.name = "Other"  # type: ignore[misc]

    def test_negative_capacity_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Disk(name="Scratch", capacity=-1)


class TestStaticDiskProvider:
    def test_returns_snapshot(self) -> None:
        disks = [Disk(name="a"), Disk(name="b")]
        provider = StaticDiskProvider(disks)
        snapshot = provider.mounted_disks()
        snapshot.clear()
        assert provider.mounted_disks() == disks


class TestConfiguredDiskProvider:
    def test_mounted_and_unmounted(self, volumes_root: Path) -> None:
        (volumes_root / "CacheVol").mkdir()
        store = MemorySettingsStore(
            Settings(
                volumes_root=str(volumes_root),
                disks=[
                    DiskSpec(name="Scratch", capacity=10),
                    DiskSpec(name="Cache", volume_name="CacheVol"),
                ],
            )
        )
        disks = ConfiguredDiskProvider(store).mounted_disks()
        assert disks == [
            Disk(name="Scratch", volume_name=None, capacity=10),
            Disk(name="Cache", volume_name="CacheVol", capacity=0),
        ]

    def test_reads_settings_on_every_call(self, volumes_root: Path) -> None:
        store = MemorySettingsStore(Settings(volumes_root=str(volumes_root)))
        provider = ConfiguredDiskProvider(store)
        assert provider.mounted_disks() == []

        (volumes_root / "New").mkdir()
        store._update(disks=[DiskSpec(name="New")])
        assert provider.mounted_disks() == [
            Disk(name="New", volume_name="New")
        ]
