"""CLI output formatting."""

from __future__ import annotations

import enum

from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .config import ConfigError, Settings
from .status import DiskStatus
from .sync.errors import SyncReason
from .sync.outcome import result_failure
from .sync.runner import SyncResult


class OutputFormat(str, enum.Enum):
    """Output format for CLI commands."""

    HUMAN = "human"
    JSON = "json"


def _status_text(active: bool, reasons: list[SyncReason]) -> Text:
    """Format status with optional reasons as styled text."""
    if active:
        return Text("ready", style="green")
    else:
        reason_str = ", ".join(r.value for r in reasons)
        return Text(f"not ready ({reason_str})", style="red")


def print_human_status(
    statuses: dict[str, DiskStatus],
    settings: Settings,
    *,
    console: Console | None = None,
) -> None:
    """Print human-readable disk status."""
    if console is None:
        console = Console()

    root = settings.sync_root or "(not configured)"
    console.print(Text.assemble(("Sync root: ", "bold"), root))

    table = Table(title="Disks:")
    table.add_column("Name", style="bold")
    table.add_column("Mount point")
    table.add_column("Backup folder")
    table.add_column("Status")

    for s in statuses.values():
        table.add_row(
            s.disk.name,
            s.mount_path or "-",
            s.backup_path or "-",
            _status_text(s.active, s.reasons),
        )

    console.print(table)


def print_human_results(
    results: list[SyncResult],
    *,
    console: Console | None = None,
) -> None:
    """Print human-readable backup or restore results."""
    if console is None:
        console = Console()

    table = Table(title="Sync results:")
    table.add_column("Disk", style="bold")
    table.add_column("Direction")
    table.add_column("Status")
    table.add_column("Details")

    for r in results:
        failure = result_failure(r)
        details_parts: list[str] = []
        if r.skipped is not None:
            status = Text("SKIPPED", style="yellow")
            details_parts.append(r.skipped.value)
        elif failure is None:
            status = Text("OK", style="green")
            details_parts.append(f"{r.source} -> {r.destination}")
        else:
            status = Text("FAILED", style="red")
            details_parts.append(failure.message)
            if r.response is not None and r.response.error:
                lines = r.response.error.strip().split("\n")[:5]
                details_parts.extend(lines)

        table.add_row(
            r.disk_name,
            r.direction.value,
            status,
            "\n".join(details_parts),
        )

    console.print(table)


def print_human_settings(
    settings: Settings,
    *,
    console: Console | None = None,
) -> None:
    """Print the current settings."""
    if console is None:
        console = Console()

    table = Table(title="Settings:", show_header=False)
    table.add_column("Key", style="bold")
    table.add_column("Value")
    table.add_row("sync-root", settings.sync_root or "(not configured)")
    table.add_row(
        "auto-recreate-disks",
        "yes" if settings.auto_recreate_disks else "no",
    )
    table.add_row("volumes-root", settings.volumes_root)
    table.add_row("rsync-path", settings.rsync_path)
    console.print(table)

    if settings.disks:
        disks = Table(title="Disks:")
        disks.add_column("Name", style="bold")
        disks.add_column("Volume name")
        disks.add_column("Capacity", justify="right")
        for d in settings.disks:
            disks.add_row(d.name, d.volume_name or "-", str(d.capacity))
        console.print(disks)


def print_config_error(
    e: ConfigError,
    *,
    console: Console | None = None,
) -> None:
    """Print a ConfigError as a Rich panel to stderr."""
    if console is None:
        console = Console(stderr=True)
    cause = e.__cause__
    match cause:
        case ValidationError():
            lines: list[str] = []
            for err in cause.errors():
                loc = " → ".join(str(p) for p in err["loc"])
                msg = err["msg"]
                if msg.startswith("Value error, "):
                    msg = msg[len("Value error, ") :]
                lines.append(f"{loc}: {msg}" if loc else msg)
            body = "\n".join(lines)
        case _:
            body = str(e)
    console.print(Panel(body, title="Settings error", style="red"))
