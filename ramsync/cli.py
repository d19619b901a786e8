"""Typer CLI: status, backup, restore and settings commands."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Annotated, Optional

import typer

from .config import (
    ConfigError,
    YamlSettingsStore,
    choose_sync_root,
    default_settings_path,
    find_settings_file,
)
from .disks import ConfiguredDiskProvider
from .log import configure_logging
from .output import (
    OutputFormat,
    print_config_error,
    print_human_results,
    print_human_settings,
    print_human_status,
)
from .status import check_all_disks
from .sync.errors import DirectoryNotValid
from .sync.outcome import result_failure
from .sync.runner import BatchReport, SyncOrchestrator

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="ramsync",
    help="Mirror RAM disks to a durable sync folder",
    no_args_is_help=True,
)

ConfigOption = Annotated[
    Optional[str],
    typer.Option("--config", "-c", help="Path to settings file"),
]
OutputOption = Annotated[
    OutputFormat,
    typer.Option("--output", "-o", help="Output format"),
]
VerboseOption = Annotated[
    int,
    typer.Option(
        "--verbose",
        "-v",
        count=True,
        help="Increase log verbosity (-v, -vv)",
    ),
]
DiskOption = Annotated[
    Optional[list[str]],
    typer.Option("--disk", "-d", help="Disk name(s) to sync"),
]


@app.command()
def status(
    config: ConfigOption = None,
    output: OutputOption = OutputFormat.HUMAN,
    verbose: VerboseOption = 0,
) -> None:
    """Show disks, their backup folders, and whether they can sync."""
    configure_logging(verbose)
    store = _open_store_or_exit(config, must_exist=True)
    settings = store.get_settings()
    disks = ConfiguredDiskProvider(store).mounted_disks()
    statuses = check_all_disks(disks, settings)

    match output:
        case OutputFormat.JSON:
            data = {
                "sync-root": settings.sync_root,
                "disks": [
                    s.model_dump(mode="json") for s in statuses.values()
                ],
            }
            typer.echo(json.dumps(data, indent=2))
        case OutputFormat.HUMAN:
            print_human_status(statuses, settings)


@app.command()
def backup(
    config: ConfigOption = None,
    disk: DiskOption = None,
    output: OutputOption = OutputFormat.HUMAN,
    verbose: VerboseOption = 0,
) -> None:
    """Mirror disks into their backup folders.

    Files in a backup folder that no longer exist on the disk are
    deleted.
    """
    configure_logging(verbose)
    store = _open_store_or_exit(config, must_exist=True)
    _check_disk_names(store, disk)
    orchestrator = SyncOrchestrator(store, ConfiguredDiskProvider(store))
    report = orchestrator.backup_all(only=disk)
    _finish_batch(report, output)


@app.command()
def restore(
    config: ConfigOption = None,
    disk: DiskOption = None,
    output: OutputOption = OutputFormat.HUMAN,
    verbose: VerboseOption = 0,
) -> None:
    """Mirror backup folders onto their disks.

    Files on a disk that are not in its backup folder are deleted.
    """
    configure_logging(verbose)
    store = _open_store_or_exit(config, must_exist=True)
    _check_disk_names(store, disk)
    orchestrator = SyncOrchestrator(store, ConfiguredDiskProvider(store))
    report = orchestrator.restore_all(only=disk)
    _finish_batch(report, output)


@app.command("set-root")
def set_root(
    path: Annotated[str, typer.Argument(help="Sync folder")],
    config: ConfigOption = None,
    verbose: VerboseOption = 0,
) -> None:
    """Choose the folder disks are mirrored into."""
    configure_logging(verbose)
    store = _open_store_or_exit(config, must_exist=False)
    try:
        stored = choose_sync_root(store, path)
    except DirectoryNotValid as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(2)
    except ConfigError as e:
        print_config_error(e)
        raise typer.Exit(2)
    typer.echo(f"Saved disk sync folder: {stored}")


@app.command("set-auto-recreate")
def set_auto_recreate(
    enabled: Annotated[
        bool,
        typer.Argument(help="Recreate disks at startup (true/false)"),
    ],
    config: ConfigOption = None,
) -> None:
    """Set whether disks are recreated when the application starts."""
    store = _open_store_or_exit(config, must_exist=False)
    try:
        store.set_auto_recreate(enabled)
    except ConfigError as e:
        print_config_error(e)
        raise typer.Exit(2)
    typer.echo(f"Auto-recreate disks: {'on' if enabled else 'off'}")


@app.command("show-config")
def show_config(
    config: ConfigOption = None,
    output: OutputOption = OutputFormat.HUMAN,
) -> None:
    """Show the current settings."""
    store = _open_store_or_exit(config, must_exist=True)
    settings = store.get_settings()
    match output:
        case OutputFormat.JSON:
            typer.echo(
                json.dumps(
                    settings.model_dump(mode="json", by_alias=True), indent=2
                )
            )
        case OutputFormat.HUMAN:
            print_human_settings(settings)


def _open_store_or_exit(
    config_path: str | None, must_exist: bool
) -> YamlSettingsStore:
    """Open the settings store or exit with code 2 on error.

    Commands that only read settings require an explicit path to
    exist; commands that write create the file on first save.
    """
    try:
        if config_path is not None and not must_exist:
            path = Path(config_path)
        else:
            path = find_settings_file(config_path) or default_settings_path()
        return YamlSettingsStore(path)
    except ConfigError as e:
        print_config_error(e)
        raise typer.Exit(2)


def _check_disk_names(
    store: YamlSettingsStore, names: list[str] | None
) -> None:
    """Exit with code 2 if a selected disk is not configured."""
    known = {d.name for d in store.get_settings().disks}
    unknown = [n for n in names or [] if n not in known]
    if unknown:
        typer.echo(
            f"Error: unknown disk(s): {', '.join(unknown)}",
            err=True,
        )
        raise typer.Exit(2)


def _finish_batch(report: BatchReport, output: OutputFormat) -> None:
    """Wait for every transfer, print results, exit 1 on any failure."""
    report.wait()
    results = report.results
    failures = [(r, result_failure(r)) for r in results]
    for r, failure in failures:
        if failure is not None:
            logger.warning("Disk '%s': %s", r.disk_name, failure.message)

    match output:
        case OutputFormat.JSON:
            data = {
                "direction": report.direction.value,
                "results": [r.model_dump(mode="json") for r in results],
            }
            typer.echo(json.dumps(data, indent=2))
        case OutputFormat.HUMAN:
            print_human_results(results)

    if any(failure is not None for _, failure in failures):
        raise typer.Exit(1)


def main() -> None:
    """Main CLI entry point."""
    app()


if __name__ == "__main__":
    main()
