"""
dashsync CLI - pull, push and diff a directory of dashboards.
"""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from dashsync.cli import common
from dashsync.cli.errors import ExitCode, exit_with_error, print_error
from dashsync.core.exceptions import DashSyncError
from dashsync.core.notifier import Notifier
from dashsync.core.sync import DiffStatus, SyncResult, SyncService

console = Console()


def _report(result: SyncResult, verb: str) -> None:
    for error in result.errors:
        print_error(f"{error.subject}: {error.message}")

    summary = f"[green]✓[/green] {len(result.written)} {verb}"
    if result.updated:
        summary += f", {len(result.updated)} updated"
    summary += f", {len(result.unchanged)} unchanged"
    console.print(summary)

    if not result.success:
        console.print(f"[red]{len(result.errors)} failed[/red]")
        raise typer.Exit(ExitCode.GENERAL_ERROR)


def pull(
    directory: Optional[Path] = typer.Argument(
        None,
        help="Resource directory (default: sync.resources_dir)",
    ),
    output_format: Optional[str] = typer.Option(
        None,
        "--format",
        "-f",
        help="File format: json or yaml (default: sync.output_format)",
    ),
) -> None:
    """
    Write every remote dashboard to disk.

    Files land at dashboards/<folder>/dashboard-<uid>.<ext>.

    Examples:
        dashsync pull resources
        dashsync pull resources --format yaml
    """
    root = common.resolve_root(directory)
    fmt = output_format or common.get_config().sync.output_format
    if fmt not in ("json", "yaml"):
        print_error(f"Unknown format '{fmt}'", solution="use --format json or --format yaml")
        raise typer.Exit(ExitCode.USER_ERROR)

    provider = common.get_provider()
    try:
        handler = provider.dashboard_handler()
        result = SyncService(handler, Notifier(console)).pull(root, fmt)
    except DashSyncError as e:
        raise exit_with_error(e)
    finally:
        provider.close()
    _report(result, "written")


def push(
    directory: Optional[Path] = typer.Argument(
        None,
        help="Resource directory (default: sync.resources_dir)",
    ),
) -> None:
    """
    Create or update remote dashboards from local files.

    Unchanged dashboards are skipped. Missing folders are created.

    Examples:
        dashsync push resources
    """
    root = common.resolve_root(directory)
    provider = common.get_provider()
    try:
        handler = provider.dashboard_handler()
        result = SyncService(handler, Notifier(console)).push(root)
    except DashSyncError as e:
        raise exit_with_error(e)
    finally:
        provider.close()
    _report(result, "added")


def diff(
    directory: Optional[Path] = typer.Argument(
        None,
        help="Resource directory (default: sync.resources_dir)",
    ),
) -> None:
    """
    Show which local dashboards differ from the remote side.

    Examples:
        dashsync diff resources
    """
    root = common.resolve_root(directory)
    provider = common.get_provider()
    try:
        handler = provider.dashboard_handler()
        diffs = SyncService(handler).diff(root)
    except DashSyncError as e:
        raise exit_with_error(e)
    finally:
        provider.close()

    styles = {
        DiffStatus.ADDED: "green",
        DiffStatus.CHANGED: "yellow",
        DiffStatus.UNCHANGED: "dim",
    }
    table = Table(title="Dashboards")
    table.add_column("Resource", style="cyan")
    table.add_column("Status")
    table.add_column("File", style="dim")
    for item in diffs:
        style = styles[item.status]
        table.add_row(item.key, f"[{style}]{item.status.value}[/{style}]", item.path)
    console.print(table)
