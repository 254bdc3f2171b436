"""
dashsync CLI - Main application entry point.

This module sets up the Typer CLI application with all subcommands.
"""

import typer
from rich.console import Console

from dashsync import __version__
from dashsync.cli import dashboard, status, sync
from dashsync.cli.common import setup_logging

# Help panel names for command grouping
PANEL_SYNC = "Sync a Directory"
PANEL_DASHBOARD = "Work with One Dashboard"
PANEL_SETUP = "Check Your Setup"

app = typer.Typer(
    name="dashsync",
    help="Keep Grafana dashboards in sync with files on disk",
    no_args_is_help=True,
    add_completion=True,
    context_settings={"help_option_names": ["--help", "-h"]},
)

console = Console()


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"dashsync version {__version__}")
        raise typer.Exit(0)


@app.callback()
def main(
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug output with detailed logging",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit",
        is_eager=True,
        callback=_version_callback,
    ),
) -> None:
    """
    dashsync - dashboards as files.

    Connection settings come from GRAFANA_URL / GRAFANA_TOKEN (or .env,
    .dashsync.json, ~/.config/dashsync/config.json).

    Common Workflows:
        dashsync pull resources      # Remote -> disk
        dashsync diff resources      # What would change
        dashsync push resources      # Disk -> remote
        dashsync rename abc xyz      # Change a dashboard's UID
        dashsync watch abc dash.json # Keep a file updated
    """
    setup_logging(debug)


# =============================================================================
# Sync a Directory
# =============================================================================

app.command(name="pull", rich_help_panel=PANEL_SYNC)(sync.pull)
app.command(name="push", rich_help_panel=PANEL_SYNC)(sync.push)
app.command(name="diff", rich_help_panel=PANEL_SYNC)(sync.diff)

# =============================================================================
# Work with One Dashboard
# =============================================================================

app.command(name="get", rich_help_panel=PANEL_DASHBOARD)(dashboard.get)
app.command(name="list", rich_help_panel=PANEL_DASHBOARD)(dashboard.list_dashboards)
app.command(name="delete", rich_help_panel=PANEL_DASHBOARD)(dashboard.delete)
app.command(name="rename", rich_help_panel=PANEL_DASHBOARD)(dashboard.rename)
app.command(name="preview", rich_help_panel=PANEL_DASHBOARD)(dashboard.preview)
app.command(name="watch", rich_help_panel=PANEL_DASHBOARD)(dashboard.watch)

# =============================================================================
# Check Your Setup
# =============================================================================

app.command(name="status", rich_help_panel=PANEL_SETUP)(status.status)


def cli_main() -> None:
    """Main CLI entry point."""
    app()


__all__ = ["app", "cli_main"]
