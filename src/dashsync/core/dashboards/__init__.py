"""
Dashboard workflows: folder resolution, rename, watching.

Example:
    >>> from dashsync.core.dashboards import DashboardHandler
    >>> handler = DashboardHandler(client, "grizzly.grafana.com/v1alpha1")
    >>> handler.rename("abc", "xyz", Notifier())
"""

from dashsync.core.dashboards.folders import FolderResolver
from dashsync.core.dashboards.handler import DashboardHandler
from dashsync.core.dashboards.rename import RenameCoordinator, random_title_token
from dashsync.core.dashboards.watcher import ChangeWatcher

__all__ = [
    "ChangeWatcher",
    "DashboardHandler",
    "FolderResolver",
    "RenameCoordinator",
    "random_title_token",
]
