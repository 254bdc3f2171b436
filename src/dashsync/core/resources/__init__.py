"""
Resource models, addressing and file codec.

Example:
    >>> from dashsync.core.resources import parse_document, path_for
    >>> resource = parse_document({"uid": "abc", "title": "Sales"},
    ...                           "grizzly.grafana.com/v1alpha1",
    ...                           default_folder="team-x")
    >>> path_for(resource, "json")
    'dashboards/team-x/dashboard-abc.json'
"""

from dashsync.core.resources.addressing import (
    files_under,
    folder_for_path,
    parse_bundle,
    parse_document,
    path_for,
    prepare,
    unprepare,
)
from dashsync.core.resources.codec import dump_resource, load_file, write_if_changed
from dashsync.core.resources.models import (
    DashboardMeta,
    DashboardWrapper,
    Folder,
    Resource,
    SnapshotResult,
)

__all__ = [
    "DashboardMeta",
    "DashboardWrapper",
    "Folder",
    "Resource",
    "SnapshotResult",
    "dump_resource",
    "files_under",
    "folder_for_path",
    "load_file",
    "parse_bundle",
    "parse_document",
    "path_for",
    "prepare",
    "unprepare",
    "write_if_changed",
]
