"""
dashsync CLI - commands acting on a single dashboard.
"""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from dashsync.cli import common
from dashsync.cli.errors import ExitCode, exit_with_error, print_error
from dashsync.core.exceptions import DashSyncError
from dashsync.core.notifier import Notifier
from dashsync.core.resources import dump_resource, load_file

console = Console()


def get(
    uid: str = typer.Argument(..., help="Dashboard UID"),
    output_format: str = typer.Option(
        "json",
        "--format",
        "-f",
        help="Output format: json or yaml",
    ),
) -> None:
    """
    Print a remote dashboard as a resource manifest.

    Examples:
        dashsync get abc
        dashsync get abc -f yaml
    """
    provider = common.get_provider()
    try:
        resource = provider.dashboard_handler().get_by_uid(uid)
        text = dump_resource(resource, output_format)
    except DashSyncError as e:
        raise exit_with_error(e)
    except ValueError as e:
        print_error(str(e))
        raise typer.Exit(ExitCode.USER_ERROR)
    finally:
        provider.close()
    console.print(text, markup=False, highlight=False, end="")


def list_dashboards() -> None:
    """
    List the UIDs of all remote dashboards.

    Examples:
        dashsync list
    """
    provider = common.get_provider()
    try:
        uids = provider.dashboard_handler().list_remote()
    except DashSyncError as e:
        raise exit_with_error(e)
    finally:
        provider.close()
    for uid in uids:
        console.print(uid, markup=False, highlight=False)
    console.print(f"[dim]{len(uids)} dashboards[/dim]")


def delete(
    uid: str = typer.Argument(..., help="Dashboard UID"),
) -> None:
    """
    Delete a remote dashboard.

    Examples:
        dashsync delete abc
    """
    provider = common.get_provider()
    try:
        provider.dashboard_handler().delete_by_uid(uid)
    except DashSyncError as e:
        raise exit_with_error(e)
    finally:
        provider.close()
    console.print(f"[green]✓[/green] Deleted {uid}")


def rename(
    old_uid: str = typer.Argument(..., help="Current dashboard UID"),
    new_uid: str = typer.Argument(..., help="New dashboard UID"),
) -> None:
    """
    Change a dashboard's UID.

    The dashboard is recreated under the new UID before the old one is
    deleted, so it is never missing remotely.

    Examples:
        dashsync rename abc xyz
    """
    provider = common.get_provider()
    try:
        provider.dashboard_handler().rename(old_uid, new_uid, Notifier(console))
    except DashSyncError as e:
        raise exit_with_error(e)
    finally:
        provider.close()


def preview(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Resource file"),
    expires: Optional[int] = typer.Option(
        None,
        "--expires",
        "-e",
        min=0,
        help="Snapshot lifetime in seconds (default: sync.snapshot_expires)",
    ),
) -> None:
    """
    Publish snapshots of the dashboards in a file for review.

    Examples:
        dashsync preview dashboards/team-x/dashboard-abc.json
        dashsync preview dash.json --expires 3600
    """
    config = common.get_config()
    expires_seconds = config.sync.snapshot_expires if expires is None else expires
    notifier = Notifier(console)
    provider = common.get_provider()
    try:
        handler = provider.dashboard_handler()
        for document in load_file(path):
            for resource in handler.parse(document):
                handler.preview(resource, notifier, expires_seconds)
    except DashSyncError as e:
        raise exit_with_error(e)
    finally:
        provider.close()


def watch(
    uid: str = typer.Argument(..., help="Dashboard UID"),
    path: Path = typer.Argument(..., dir_okay=False, help="Local file to keep updated"),
) -> None:
    """
    Mirror a remote dashboard into a local file until interrupted.

    Examples:
        dashsync watch abc dashboards/team-x/dashboard-abc.json
    """
    fmt = "yaml" if path.suffix in (".yaml", ".yml") else "json"
    console.print(f"[blue]Watching {uid} → {path} (Ctrl+C to stop)[/blue]")
    provider = common.get_provider()
    try:
        handler = provider.dashboard_handler()
        handler.listen(Notifier(console), uid, path, fmt=fmt)
    except KeyboardInterrupt:
        console.print("[dim]Stopped[/dim]")
        raise typer.Exit(ExitCode.SIGINT)
    except DashSyncError as e:
        raise exit_with_error(e)
    finally:
        provider.close()
