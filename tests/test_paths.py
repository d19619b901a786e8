"""Tests for ramsync.sync.paths."""

from __future__ import annotations

from pathlib import Path

import pytest

from ramsync.sync.paths import (
    is_usable_directory,
    mount_path,
    resolve_backup_path,
)


class TestResolveBackupPath:
    def test_scenario_cyrillic_name(self) -> None:
        assert resolve_backup_path("Проект 1", "/tmp/sync") == (
            "/tmp/sync/proekt_1/"
        )

    @pytest.mark.parametrize("name", ["", "Scratch", "Проект 1", "!!!"])
    def test_unconfigured_root(self, name: str) -> None:
        assert resolve_backup_path(name, "") is None

    @pytest.mark.parametrize("name", ["", "!!!"])
    def test_degenerate_slug_still_resolves(self, name: str) -> None:
        assert resolve_backup_path(name, "/srv/sync") == "/srv/sync//"

    def test_no_filesystem_access(self, tmp_path: Path) -> None:
        root = tmp_path / "does-not-exist"
        assert resolve_backup_path("Disk", str(root)) == f"{root}/disk/"
        assert not root.exists()


class TestMountPath:
    def test_default_volumes_root(self) -> None:
        assert mount_path("RAM Disk") == "/Volumes/RAM Disk/"

    def test_custom_volumes_root(self) -> None:
        assert mount_path("ram", "/mnt") == "/mnt/ram/"


class TestIsUsableDirectory:
    def test_directory(self, tmp_path: Path) -> None:
        assert is_usable_directory(str(tmp_path))

    def test_directory_with_trailing_slash(self, tmp_path: Path) -> None:
        assert is_usable_directory(f"{tmp_path}/")

    def test_missing(self, tmp_path: Path) -> None:
        assert not is_usable_directory(str(tmp_path / "missing"))

    def test_regular_file(self, tmp_path: Path) -> None:
        f = tmp_path / "file"
        f.write_text("x")
        assert not is_usable_directory(str(f))
