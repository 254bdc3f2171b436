"""
dashsync CLI - show provider configuration and connectivity.
"""

import typer
from rich.console import Console
from rich.table import Table

from dashsync.cli import common
from dashsync.cli.errors import ExitCode

console = Console()


def status() -> None:
    """
    Check that Grafana is configured and reachable.

    Examples:
        dashsync status
    """
    provider = common.get_provider()
    try:
        provider_status = provider.status()
    finally:
        provider.close()

    table = Table(title=f"{provider.name} provider", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("URL", provider.config.grafana.url or "[dim]not set[/dim]")
    table.add_row("API version", provider.api_version)
    table.add_row(
        "Active",
        "[green]yes[/green]" if provider_status.active
        else f"[red]no[/red] ({provider_status.active_reason})",
    )
    if provider_status.active:
        table.add_row(
            "Online",
            "[green]yes[/green]" if provider_status.online
            else f"[red]no[/red] ({provider_status.online_reason})",
        )
    console.print(table)

    if not provider_status.active:
        raise typer.Exit(ExitCode.USER_ERROR)
    if not provider_status.online:
        raise typer.Exit(ExitCode.GENERAL_ERROR)
