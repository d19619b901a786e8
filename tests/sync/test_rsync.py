"""Tests for ramsync.sync.rsync."""

from __future__ import annotations

import stat
import threading
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from ramsync.sync.rsync import (
    MIRROR_OPTIONS,
    Response,
    build_mirror_command,
    invoke_mirror,
)


def _fake_rsync(tmp_path: Path, body: str) -> str:
    """Write an executable stand-in for rsync and return its path."""
    script = tmp_path / "fake-rsync"
    script.write_text(f"#!/bin/sh\n{body}\n")
    script.chmod(script.stat().st_mode | stat.S_IXUSR)
    return str(script)


class TestBuildMirrorCommand:
    def test_basic(self) -> None:
        cmd = build_mirror_command("/Volumes/Scratch/", "/srv/sync/scratch/")
        assert cmd == [
            "rsync",
            "-xrlptgoEv",
            "--progress",
            "--delete",
            "/Volumes/Scratch/",
            "/srv/sync/scratch/",
        ]

    def test_adds_trailing_slashes(self) -> None:
        cmd = build_mirror_command("/a", "/b")
        assert cmd[-2:] == ["/a/", "/b/"]

    def test_custom_rsync_path(self) -> None:
        cmd = build_mirror_command("/a/", "/b/", rsync_path="/usr/bin/rsync")
        assert cmd[0] == "/usr/bin/rsync"

    def test_mirror_deletes_extraneous(self) -> None:
        assert "--delete" in MIRROR_OPTIONS


class TestInvokeMirror:
    @patch("ramsync.sync.rsync.subprocess.Popen")
    def test_response_and_callback(self, mock_popen: MagicMock) -> None:
        proc = MagicMock()
        proc.pid = 4242
        proc.returncode = 23
        proc.communicate.return_value = ("sent 10 bytes\n", "some error\n")
        mock_popen.return_value = proc

        received: list[Response] = []
        called = threading.Event()

        def on_complete(response: Response) -> None:
            received.append(response)
            called.set()

        job = invoke_mirror("/src", "/dst", on_complete=on_complete)
        response = job.wait(timeout=5)

        assert called.wait(timeout=5)
        assert received == [response]
        assert response == Response(
            output="sent 10 bytes\n",
            error="some error\n",
            termination_status=23,
        )
        assert job.source == "/src/"
        assert job.destination == "/dst/"
        cmd = mock_popen.call_args[0][0]
        assert cmd == ["rsync", *MIRROR_OPTIONS, "/src/", "/dst/"]

    @patch("ramsync.sync.rsync.subprocess.Popen")
    def test_without_callback(self, mock_popen: MagicMock) -> None:
        proc = MagicMock()
        proc.pid = 1
        proc.returncode = 0
        proc.communicate.return_value = ("", "")
        mock_popen.return_value = proc

        job = invoke_mirror("/src/", "/dst/")
        assert job.wait(timeout=5).termination_status == 0
        assert job.done()

    @patch("ramsync.sync.rsync.subprocess.Popen")
    def test_returns_before_process_exits(
        self, mock_popen: MagicMock
    ) -> None:
        release = threading.Event()
        proc = MagicMock()
        proc.pid = 2
        proc.returncode = 0

        def communicate() -> tuple[str, str]:
            release.wait(timeout=5)
            return ("", "")

        proc.communicate.side_effect = communicate
        mock_popen.return_value = proc

        job = invoke_mirror("/src/", "/dst/")
        assert not job.done()
        release.set()
        job.wait(timeout=5)
        assert job.done()

    @patch("ramsync.sync.rsync.subprocess.Popen")
    def test_collect_failure_still_completes(
        self, mock_popen: MagicMock
    ) -> None:
        proc = MagicMock()
        proc.pid = 3
        proc.returncode = -9
        proc.communicate.side_effect = RuntimeError("pipe closed")
        mock_popen.return_value = proc
        received: list[Response] = []
        called = threading.Event()

        def on_complete(response: Response) -> None:
            received.append(response)
            called.set()

        job = invoke_mirror("/src/", "/dst/", on_complete=on_complete)
        response = job.wait(timeout=5)

        assert called.wait(timeout=5)
        assert received == [response]
        assert response.error == "pipe closed"
        assert response.termination_status == -9
        proc.kill.assert_called_once_with()
        proc.wait.assert_called_once_with()

    def test_start_failure_propagates(self, tmp_path: Path) -> None:
        with pytest.raises(OSError):
            invoke_mirror(
                "/src/",
                "/dst/",
                rsync_path=str(tmp_path / "no-such-rsync"),
            )

    def test_real_process(self, tmp_path: Path) -> None:
        rsync = _fake_rsync(
            tmp_path,
            'echo "args: $*"\necho "bad thing" >&2\nexit 3',
        )
        job = invoke_mirror("/from", "/to", rsync_path=rsync)
        response = job.wait(timeout=10)
        assert response.termination_status == 3
        assert response.output == (
            "args: -xrlptgoEv --progress --delete /from/ /to/\n"
        )
        assert response.error == "bad thing\n"

    def test_non_utf8_output_is_replaced(self, tmp_path: Path) -> None:
        rsync = _fake_rsync(tmp_path, "printf 'caf\\351\\n'")
        response = invoke_mirror("/a", "/b", rsync_path=rsync).wait(10)
        assert response.output == "caf�\n"
        assert response.termination_status == 0
