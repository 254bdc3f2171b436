"""
Mirror a remote dashboard to a local file.

Polls the remote dashboard at a fixed interval and rewrites the local file
whenever the serialized content differs from what was last written.

Known hazard: a concurrent rename or delete of the same UID is not
coordinated with the watcher. A deleted dashboard ends the watch with
NotFoundError; content fetched just before a rename may still be written.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import TYPE_CHECKING

from dashsync.core.exceptions import DashSyncError, TransportError
from dashsync.core.notifier import Notifier
from dashsync.core.resources.codec import dump_resource

if TYPE_CHECKING:
    from dashsync.core.dashboards.handler import DashboardHandler

logger = logging.getLogger(__name__)


class ChangeWatcher:
    """
    Poll one dashboard and keep a local file in sync with it.

    Transport errors are transient: they are reported and retried on the
    next tick, up to ``max_failures`` in a row. Any other error (the
    dashboard was deleted, the payload is malformed) ends the watch.

    Example:
        >>> watcher = ChangeWatcher(handler, poll_interval=2.0)
        >>> thread, stop = watcher.start(Notifier(), "abc", Path("dash.json"))
        >>> ...
        >>> stop.set()
        >>> thread.join()
        >>> watcher.error  # set if the watch ended on its own
    """

    def __init__(
        self,
        handler: DashboardHandler,
        poll_interval: float = 2.0,
        max_failures: int = 3,
        fmt: str = "json",
    ) -> None:
        if poll_interval <= 0:
            raise ValueError("poll_interval must be positive")
        if max_failures < 1:
            raise ValueError("max_failures must be >= 1")
        self.handler = handler
        self.poll_interval = poll_interval
        self.max_failures = max_failures
        self.fmt = fmt
        self.error: DashSyncError | None = None

    def watch(
        self,
        notifier: Notifier,
        uid: str,
        path: Path,
        stop_event: threading.Event | None = None,
    ) -> None:
        """
        Block, mirroring ``uid`` into ``path`` until ``stop_event`` is set.

        Raises:
            NotFoundError: If the dashboard disappears remotely
            MalformedResponseError: If the remote payload cannot be read
            TransportError: After ``max_failures`` consecutive transport errors
        """
        stop = stop_event or threading.Event()
        path = Path(path)
        last_written = path.read_text() if path.exists() else None
        failures = 0

        logger.debug(f"Watching {uid} -> {path} every {self.poll_interval}s")
        while not stop.is_set():
            try:
                resource = self.handler.get_by_uid(uid)
            except TransportError as e:
                failures += 1
                if failures >= self.max_failures:
                    raise
                logger.warning(f"Fetching {uid} failed ({failures}/{self.max_failures}): {e}")
                notifier.warn(uid, f"fetch failed, retrying: {e}")
            else:
                failures = 0
                content = dump_resource(resource, self.fmt)
                if content != last_written:
                    path.parent.mkdir(parents=True, exist_ok=True)
                    path.write_text(content)
                    last_written = content
                    notifier.info(resource, f"written to {path}")
            stop.wait(self.poll_interval)

    def _run(self, notifier: Notifier, uid: str, path: Path, stop: threading.Event) -> None:
        try:
            self.watch(notifier, uid, path, stop)
        except DashSyncError as e:
            self.error = e
            logger.error(f"Watch of {uid} ended: {e}")
            notifier.error(uid, f"watch ended: {e}")

    def start(
        self,
        notifier: Notifier,
        uid: str,
        path: Path,
    ) -> tuple[threading.Thread, threading.Event]:
        """
        Run :meth:`watch` on a daemon thread; set the returned event to stop it.

        An error that ends the watch is kept in :attr:`error` once the
        thread has finished.
        """
        self.error = None
        stop = threading.Event()
        thread = threading.Thread(
            target=self._run,
            args=(notifier, uid, path, stop),
            name=f"watch-{uid}",
            daemon=True,
        )
        thread.start()
        return thread, stop


__all__ = ["ChangeWatcher"]
