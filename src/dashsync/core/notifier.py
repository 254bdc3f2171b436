"""
User-facing notifications.

Messages are keyed by a subject (a Resource or a plain string), printed
with rich markup and mirrored to the module logger.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.markup import escape

from dashsync.core.resources.models import Resource

logger = logging.getLogger(__name__)


def subject_label(subject: Resource | str) -> str:
    """``Dashboard.<uid>`` for resources, the string itself otherwise."""
    if isinstance(subject, Resource):
        return subject.key
    return str(subject)


class Notifier:
    """
    Leveled messages about resources.

    Example:
        >>> notifier = Notifier()
        >>> notifier.info("abc", "renamed to xyz")
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def _emit(self, level: int, style: str, subject: Resource | str, message: str) -> None:
        label = subject_label(subject)
        logger.log(level, f"{label}: {message}")
        self.console.print(f"[{style}]{escape(label)}[/{style}] {escape(message)}")

    def info(self, subject: Resource | str, message: str) -> None:
        self._emit(logging.INFO, "green", subject, message)

    def warn(self, subject: Resource | str, message: str) -> None:
        self._emit(logging.WARNING, "yellow", subject, message)

    def error(self, subject: Resource | str, message: str) -> None:
        self._emit(logging.ERROR, "red", subject, message)
