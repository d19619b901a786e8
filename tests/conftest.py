"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from ramsync.config import DiskSpec, MemorySettingsStore, Settings
from ramsync.disks import Disk

SAMPLE_YAML = """\
sync-root: /srv/ramsync
auto-recreate-disks: true
volumes-root: /Volumes
disks:
  - name: Scratch
    capacity: 1073741824
  - name: Проект 1
    volume-name: Project
    capacity: 536870912
"""


@pytest.fixture()
def sample_settings_file(tmp_path: Path) -> Path:
    """Write sample YAML settings to a temp file."""
    p = tmp_path / "settings.yaml"
    p.write_text(SAMPLE_YAML, encoding="utf-8")
    return p


@pytest.fixture()
def sync_root(tmp_path: Path) -> Path:
    p = tmp_path / "sync"
    p.mkdir()
    return p


@pytest.fixture()
def volumes_root(tmp_path: Path) -> Path:
    p = tmp_path / "Volumes"
    p.mkdir()
    return p


@pytest.fixture()
def settings(sync_root: Path, volumes_root: Path) -> Settings:
    return Settings(
        sync_root=str(sync_root),
        volumes_root=str(volumes_root),
        disks=[
            DiskSpec(name="Scratch", capacity=1024),
            DiskSpec(name="Cache", volume_name="CacheVol", capacity=2048),
        ],
    )


@pytest.fixture()
def store(settings: Settings) -> MemorySettingsStore:
    return MemorySettingsStore(settings)


@pytest.fixture()
def mounted_disk(
    sync_root: Path, volumes_root: Path
) -> Disk:
    """A mounted disk whose backup folder already exists."""
    (volumes_root / "Scratch").mkdir()
    (sync_root / "scratch").mkdir()
    return Disk(name="Scratch", volume_name="Scratch", capacity=1024)
