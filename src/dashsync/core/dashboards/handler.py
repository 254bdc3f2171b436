"""
Dashboard handler.

Ties addressing, folder resolution, rename and watching together over a
RemoteGateway. Dashboards may declare their folder with a ``folderName``
field, or a bundle may declare one ``grafanaDashboardFolder`` for all of
its dashboards. A folder that does not exist yet is created on push, with
UID and title both equal to the declared name.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from pathlib import Path
from typing import Any

from dashsync.core.dashboards.folders import FolderResolver
from dashsync.core.dashboards.rename import RenameCoordinator, random_title_token
from dashsync.core.dashboards.watcher import ChangeWatcher
from dashsync.core.exceptions import NotFoundError
from dashsync.core.grafana.gateway import RemoteGateway
from dashsync.core.notifier import Notifier
from dashsync.core.resources.addressing import (
    DASHBOARD_KIND,
    files_under,
    parse_bundle,
    path_for,
    prepare,
    unprepare,
)
from dashsync.core.resources.models import Folder, Resource

logger = logging.getLogger(__name__)


class DashboardHandler:
    """
    Operations on Grafana dashboards as synchronized resources.

    Example:
        >>> handler = DashboardHandler(client, "grizzly.grafana.com/v1alpha1")
        >>> resource = handler.get_by_uid("abc")
        >>> handler.resource_file_path(resource, "json")
        'dashboards/team-x/dashboard-abc.json'
    """

    extension = "json"

    def __init__(
        self,
        gateway: RemoteGateway,
        api_version: str,
        resolver: FolderResolver | None = None,
        token_generator: Callable[[], str] = random_title_token,
        poll_interval: float = 2.0,
        max_watch_failures: int = 3,
    ) -> None:
        self.gateway = gateway
        self.api_version = api_version
        self.resolver = resolver or FolderResolver.default(gateway.get_folder_by_id)
        self.renamer = RenameCoordinator(self, token_generator=token_generator)
        self.poll_interval = poll_interval
        self.max_watch_failures = max_watch_failures
        self._known_folders: set[str] = set()

    @property
    def kind(self) -> str:
        return DASHBOARD_KIND

    # ------------------------------------------------------------------
    # Local side
    # ------------------------------------------------------------------

    def find_resource_files(self, root_dir: Path | str) -> list[Path]:
        return files_under(root_dir)

    def resource_file_path(self, resource: Resource, filetype: str) -> str:
        return path_for(resource, filetype)

    def parse(self, document: dict[str, Any], default_folder: str | None = None) -> list[Resource]:
        return parse_bundle(document, self.api_version, default_folder=default_folder)

    def unprepare(self, resource: Resource) -> Resource:
        return unprepare(resource)

    def prepare(self, existing: Resource | None, resource: Resource) -> Resource:
        return prepare(existing, resource)

    # ------------------------------------------------------------------
    # Remote side
    # ------------------------------------------------------------------

    def get_by_uid(self, uid: str) -> Resource:
        """
        Fetch a dashboard and return it folder-resolved and unprepared.

        Raises:
            NotFoundError: If the dashboard does not exist
        """
        wrapper = self.gateway.get_dashboard(uid)
        folder = self.resolver.resolve(wrapper)
        resource = Resource(
            api_version=self.api_version,
            kind=self.kind,
            metadata={"name": wrapper.uid or uid, "folder": folder},
            spec=wrapper.dashboard,
        )
        return self.unprepare(resource)

    def get_remote(self, resource: Resource) -> Resource:
        return self.get_by_uid(resource.name)

    def list_remote(self) -> list[str]:
        return self.gateway.list_dashboard_uids()

    def _ensure_folder(self, resource: Resource) -> None:
        folder_uid = resource.get_metadata("folder")
        if not folder_uid or folder_uid in self._known_folders:
            return
        try:
            self.gateway.get_folder(folder_uid)
        except NotFoundError:
            logger.info(f"Creating folder {folder_uid} for {resource.key}")
            self.gateway.create_folder(Folder(uid=folder_uid, title=folder_uid))
        self._known_folders.add(folder_uid)

    def add(self, resource: Resource) -> None:
        """Create a dashboard (and its folder, if missing); an existing UID is refused."""
        self._ensure_folder(resource)
        self.gateway.post_dashboard(self.prepare(None, resource), overwrite=False)

    def update(self, existing: Resource | None, resource: Resource) -> None:
        """Replace a dashboard with ``resource``."""
        self._ensure_folder(resource)
        self.gateway.post_dashboard(self.prepare(existing, resource), overwrite=True)

    def delete_by_uid(self, uid: str) -> None:
        self.gateway.delete_dashboard(uid)

    def rename(self, old_uid: str, new_uid: str, notifier: Notifier) -> Resource:
        """Change a dashboard's UID; see :class:`RenameCoordinator`."""
        return self.renamer.rename(old_uid, new_uid, notifier)

    def preview(self, resource: Resource, notifier: Notifier, expires_seconds: int = 0) -> None:
        """Publish a snapshot of ``resource`` and report its view/delete URLs."""
        snapshot = self.gateway.create_snapshot(self.prepare(None, resource), expires_seconds)
        notifier.info(resource, "view: " + snapshot.url)
        notifier.error(resource, "delete: " + snapshot.delete_url)
        if expires_seconds > 0:
            notifier.warn(
                resource,
                f"Previews will expire and be deleted automatically in {expires_seconds} seconds",
            )

    def listen(
        self,
        notifier: Notifier,
        uid: str,
        path: Path,
        stop_event: threading.Event | None = None,
        fmt: str = "json",
    ) -> None:
        """Mirror ``uid`` into ``path`` until ``stop_event`` is set."""
        watcher = ChangeWatcher(
            self,
            poll_interval=self.poll_interval,
            max_failures=self.max_watch_failures,
            fmt=fmt,
        )
        watcher.watch(notifier, uid, path, stop_event)


__all__ = ["DashboardHandler"]
