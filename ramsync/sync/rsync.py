"""Rsync mirror command building and asynchronous execution.

Every transfer runs with ``--delete``: anything at the destination
that is absent from the source is removed. Callers must treat a
mirror as destructive to its destination.
"""

from __future__ import annotations

import contextlib
import logging
import subprocess
import threading
from concurrent.futures import Future
from dataclasses import dataclass, field
from typing import Callable, Optional

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)

# -x one file system, -r recursive, -l symlinks, -p perms, -t times,
# -g group, -o owner, -E extended attributes, -v verbose
MIRROR_OPTIONS: list[str] = [
    "-xrlptgoEv",
    "--progress",
    "--delete",
]


class Response(BaseModel):
    """What a finished rsync process said and how it exited."""

    model_config = ConfigDict(frozen=True)

    output: str
    error: str
    termination_status: int


OnComplete = Callable[[Response], None]


@dataclass
class TransferJob:
    """One running or finished mirror invocation."""

    source: str
    destination: str
    command: list[str]
    future: Future[Response] = field(default_factory=Future)

    def done(self) -> bool:
        return self.future.done()

    def wait(self, timeout: Optional[float] = None) -> Response:
        """Block until the process exits and return its response."""
        return self.future.result(timeout)


def _with_trailing_slash(path: str) -> str:
    return path if path.endswith("/") else f"{path}/"


def build_mirror_command(
    source: str,
    destination: str,
    rsync_path: str = "rsync",
) -> list[str]:
    """Build the rsync command mirroring source contents to destination."""
    return [
        rsync_path,
        *MIRROR_OPTIONS,
        _with_trailing_slash(source),
        _with_trailing_slash(destination),
    ]


def _collect(proc: subprocess.Popen[str], job: TransferJob) -> None:
    try:
        stdout, stderr = proc.communicate()
    except Exception as e:
        logger.error("Lost rsync process %s: %s", proc.pid, e)
        with contextlib.suppress(ProcessLookupError):
            proc.kill()
        proc.wait()
        returncode = proc.returncode
        job.future.set_result(
            Response(
                output="",
                error=str(e) or type(e).__name__,
                termination_status=-1 if returncode is None else returncode,
            )
        )
        return
    logger.debug(
        "rsync %s -> %s exited with %s",
        job.source,
        job.destination,
        proc.returncode,
    )
    job.future.set_result(
        Response(
            output=stdout or "",
            error=stderr or "",
            termination_status=proc.returncode,
        )
    )


def invoke_mirror(
    source: str,
    destination: str,
    on_complete: OnComplete | None = None,
    rsync_path: str = "rsync",
) -> TransferJob:
    """Start mirroring source to destination and return immediately.

    The process output is collected on a watcher thread. When it
    exits, the job's future resolves with a ``Response`` and
    ``on_complete``, if given, is called once on that thread. The
    exit code is reported as is; a non-zero status is not an
    exception here. ``OSError`` from starting rsync propagates.
    If collecting output fails, the process is killed and reaped and
    the response carries the error text.
    """
    cmd = build_mirror_command(source, destination, rsync_path)
    job = TransferJob(
        source=cmd[-2],
        destination=cmd[-1],
        command=cmd,
    )
    if on_complete is not None:
        callback = on_complete
        job.future.add_done_callback(lambda f: callback(f.result()))

    logger.debug("Source: %s", job.source)
    logger.debug("Destination: %s", job.destination)
    proc = subprocess.Popen(
        cmd,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
        encoding="utf-8",
        errors="replace",
    )
    job.future.set_running_or_notify_cancel()
    watcher = threading.Thread(
        target=_collect,
        args=(proc, job),
        name=f"rsync-{proc.pid}",
    )
    watcher.start()
    return job
