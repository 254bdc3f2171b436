"""
Directory-level synchronization between a resource tree and the remote service.

- pull: write every remote dashboard to its addressed path
- push: create or update remote dashboards from local files
- diff: report which local dashboards differ from the remote side

Individual resource failures during pull/push are collected in the
result rather than aborting the whole run.
"""

from __future__ import annotations

import logging
from pathlib import Path

from dashsync.core.dashboards.handler import DashboardHandler
from dashsync.core.exceptions import DashSyncError, NotFoundError
from dashsync.core.notifier import Notifier
from dashsync.core.resources.addressing import folder_for_path, unprepare
from dashsync.core.resources.codec import FORMATS, dump_resource, load_file, write_if_changed
from dashsync.core.resources.models import Resource
from dashsync.core.sync.models import DiffStatus, ResourceDiff, SyncError, SyncResult

logger = logging.getLogger(__name__)


def same_content(remote: Resource, local: Resource) -> bool:
    """True when pushing ``local`` would not change ``remote``."""
    remote = unprepare(remote)
    local = unprepare(local).with_spec("uid", local.name)
    return (
        remote.spec == local.spec
        and remote.get_metadata("folder", "") == local.get_metadata("folder", "")
    )


class SyncService:
    """
    Pull, push and diff a directory of dashboard files.

    Example:
        >>> sync = SyncService(handler)
        >>> result = sync.pull(Path("resources"))
        >>> print(f"{len(result.written)} dashboards written")
    """

    def __init__(self, handler: DashboardHandler, notifier: Notifier | None = None) -> None:
        self.handler = handler
        self.notifier = notifier

    def load_resources(
        self,
        root_dir: Path,
        errors: list[SyncError] | None = None,
    ) -> list[tuple[Path, Resource]]:
        """
        Parse every resource file under ``root_dir``.

        The folder implied by a file's location applies unless the document
        declares its own.

        Args:
            root_dir: Directory holding the ``dashboards/`` tree
            errors: If given, parse failures are appended here instead of raised

        Raises:
            DashSyncError: On the first unparseable file when ``errors`` is None
        """
        loaded: list[tuple[Path, Resource]] = []
        for path in self.handler.find_resource_files(root_dir):
            try:
                for document in load_file(path):
                    for resource in self.handler.parse(document, folder_for_path(path)):
                        loaded.append((path, resource))
            except DashSyncError as e:
                if errors is None:
                    raise
                logger.warning(f"Skipping {path}: {e}")
                errors.append(SyncError(subject=str(path), message=str(e)))
        return loaded

    def pull(self, root_dir: Path, fmt: str = "json") -> SyncResult:
        """
        Write every remote dashboard under ``root_dir``.

        Files already holding the current content are left untouched.
        """
        if fmt not in FORMATS:
            raise ValueError(f"Unknown resource format '{fmt}', expected one of {FORMATS}")
        result = SyncResult()
        for uid in self.handler.list_remote():
            try:
                resource = self.handler.get_by_uid(uid)
                path = Path(root_dir) / self.handler.resource_file_path(resource, fmt)
                if write_if_changed(path, dump_resource(resource, fmt)):
                    result.written.append(resource.key)
                    self._info(resource, f"written to {path}")
                else:
                    result.unchanged.append(resource.key)
            except DashSyncError as e:
                logger.warning(f"Pulling {uid} failed: {e}")
                result.errors.append(SyncError(subject=uid, message=str(e)))
        return result

    def push(self, root_dir: Path) -> SyncResult:
        """Create missing and update changed remote dashboards from ``root_dir``."""
        result = SyncResult()
        for _, resource in self.load_resources(root_dir, errors=result.errors):
            try:
                existing = self._fetch_existing(resource)
                if existing is None:
                    self.handler.add(resource)
                    result.written.append(resource.key)
                    self._info(resource, "added")
                elif same_content(existing, resource):
                    result.unchanged.append(resource.key)
                else:
                    self.handler.update(existing, resource)
                    result.updated.append(resource.key)
                    self._info(resource, "updated")
            except DashSyncError as e:
                logger.warning(f"Pushing {resource.key} failed: {e}")
                result.errors.append(SyncError(subject=resource.key, message=str(e)))
        return result

    def diff(self, root_dir: Path) -> list[ResourceDiff]:
        """Compare local resources with the remote side without changing anything."""
        diffs: list[ResourceDiff] = []
        for path, resource in self.load_resources(root_dir):
            existing = self._fetch_existing(resource)
            if existing is None:
                status = DiffStatus.ADDED
            elif same_content(existing, resource):
                status = DiffStatus.UNCHANGED
            else:
                status = DiffStatus.CHANGED
            diffs.append(ResourceDiff(key=resource.key, status=status, path=str(path)))
        return diffs

    def _fetch_existing(self, resource: Resource) -> Resource | None:
        try:
            return self.handler.get_remote(resource)
        except NotFoundError:
            return None

    def _info(self, resource: Resource, message: str) -> None:
        if self.notifier is not None:
            self.notifier.info(resource, message)
