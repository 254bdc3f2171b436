"""
Standardized error handling and exit codes for the dashsync CLI.
"""

from enum import IntEnum

import typer
from rich.console import Console

from dashsync.core.exceptions import ConfigError, DashSyncError, RenameError

console = Console(stderr=True)


class ExitCode(IntEnum):
    """Standard exit codes for dashsync CLI operations."""

    SUCCESS = 0
    """Operation completed successfully."""

    GENERAL_ERROR = 1
    """Remote, parse or sync failure."""

    USER_ERROR = 2
    """Configuration or input error (actionable by user)."""

    SIGINT = 130
    """Terminated by SIGINT (Ctrl+C) - Unix standard."""


def print_error(
    problem: str,
    *,
    reason: str | None = None,
    solution: str | None = None,
) -> None:
    """
    Print a standardized error message with actionable guidance.

    Example:
        >>> print_error(
        ...     "grafana URL is not set",
        ...     solution="export GRAFANA_URL=http://localhost:3000",
        ... )
    """
    console.print(f"[red]Error:[/red] {problem}")

    if reason:
        console.print(f"[dim]{reason}[/dim]")

    if solution:
        console.print(f"[cyan]→ Try:[/cyan] {solution}")


def exit_with_error(error: DashSyncError) -> typer.Exit:
    """
    Report a dashsync error and build the matching typer.Exit.

    Usage: ``raise exit_with_error(e)``
    """
    if isinstance(error, ConfigError):
        print_error(
            str(error),
            solution="set GRAFANA_URL / GRAFANA_TOKEN or add a .dashsync.json",
        )
        return typer.Exit(ExitCode.USER_ERROR)

    if isinstance(error, RenameError):
        resume = {
            "delete": f"dashsync delete {error.old_uid}, then push the title again",
            "restore-title": f"push {error.new_uid} again to restore its title",
        }.get(error.step)
        print_error(str(error), solution=resume)
        return typer.Exit(ExitCode.GENERAL_ERROR)

    print_error(str(error))
    return typer.Exit(ExitCode.GENERAL_ERROR)
