"""
Resource addressing: identity <-> file path, and document parsing.

On-disk layout (relative to a root directory)::

    dashboards/<folder-uid>/dashboard-<name>.<ext>

Dashboards in the General folder have an empty folder segment. The
filesystem collapses ``dashboards//dashboard-x.json`` to
``dashboards/dashboard-x.json``, so discovery looks there too.

Two authoring conventions are accepted and may be mixed in one tree:

- per-dashboard override: a ``folderName`` field inside the dashboard body
- single folder for all: a root-level ``grafanaDashboardFolder`` next to
  a ``grafanaDashboards`` mapping

Either way the folder declaration is stripped from the body and moved into
``metadata["folder"]``.
"""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any

from dashsync.core.exceptions import AddressingError, ResourceParseError
from dashsync.core.resources.models import Resource

DASHBOARD_KIND = "Dashboard"
DASHBOARD_GLOB = "dashboards/*/dashboard-*"
GENERAL_DASHBOARD_GLOB = "dashboards/dashboard-*"
DASHBOARD_PATTERN = "dashboards/{folder}/dashboard-{name}.{ext}"

FOLDER_OVERRIDE_FIELD = "folderName"
BUNDLE_FOLDER_FIELD = "grafanaDashboardFolder"
BUNDLE_DASHBOARDS_FIELD = "grafanaDashboards"

# Fields the remote service adds to a stored dashboard
TRANSIENT_SPEC_FIELDS = ("id", "version")


def files_under(root_dir: Path | str) -> list[Path]:
    """
    Find every candidate dashboard file beneath a root directory.

    Args:
        root_dir: Directory holding the ``dashboards/`` tree

    Returns:
        Matching file paths. Order is not significant.
    """
    root = Path(root_dir)
    found = [p for p in root.glob(DASHBOARD_GLOB) if p.is_file()]
    found.extend(p for p in root.glob(GENERAL_DASHBOARD_GLOB) if p.is_file())
    return sorted(found)


def path_for(resource: Resource, extension: str) -> str:
    """
    Compute the relative path where a resource is stored.

    Args:
        resource: A folder-resolved resource
        extension: File extension without the dot (e.g. ``json``)

    Returns:
        ``dashboards/{folder}/dashboard-{name}.{ext}``

    Raises:
        AddressingError: If the resource has no ``folder`` metadata

    Example:
        >>> r = Resource(apiVersion="v1", kind="Dashboard",
        ...              metadata={"name": "abc", "folder": "team-x"})
        >>> path_for(r, "json")
        'dashboards/team-x/dashboard-abc.json'
    """
    if not resource.has_metadata("folder"):
        raise AddressingError(
            f"{resource.key} has no folder metadata; resolve its folder first",
            resource=resource.key,
        )
    return DASHBOARD_PATTERN.format(
        folder=resource.get_metadata("folder"),
        name=resource.name,
        ext=extension,
    )


def folder_for_path(path: Path | str) -> str | None:
    """
    Read the folder UID implied by a file's location in the layout.

    Returns ``None`` for files outside the ``dashboards/`` tree.
    """
    parent = Path(path).parent
    if parent.name == "dashboards":
        return ""
    if parent.parent.name == "dashboards":
        return parent.name
    return None


def parse_document(
    document: dict[str, Any],
    api_version: str,
    default_folder: str | None = None,
) -> Resource:
    """
    Turn one raw document into a Resource.

    Accepts either a manifest (``apiVersion``/``kind``/``metadata``/``spec``)
    or a bare dashboard JSON. A ``folderName`` in the dashboard body wins
    over ``default_folder`` and over manifest metadata; it is removed from
    the body. ``spec.uid`` is normalized to the resource name.

    Raises:
        ResourceParseError: If the document has no usable identity
    """
    if not isinstance(document, dict):
        raise ResourceParseError("Resource document must be a mapping")

    if "spec" in document and "kind" in document:
        metadata = dict(document.get("metadata") or {})
        spec = copy.deepcopy(document.get("spec") or {})
        kind = str(document["kind"])
        version = str(document.get("apiVersion") or api_version)
        if not isinstance(spec, dict):
            raise ResourceParseError(f"{kind} spec must be a mapping")
    else:
        spec = copy.deepcopy(document)
        metadata = {}
        kind = DASHBOARD_KIND
        version = api_version

    name = metadata.get("name") or spec.get("uid")
    if not isinstance(name, str) or not name:
        raise ResourceParseError(
            f"{kind} has no name: set metadata.name or a uid",
            title=spec.get("title"),
        )
    metadata["name"] = name

    override = spec.pop(FOLDER_OVERRIDE_FIELD, None)
    if override is not None:
        metadata["folder"] = str(override)
    elif "folder" not in metadata and default_folder is not None:
        metadata["folder"] = default_folder

    spec["uid"] = name
    return Resource(api_version=version, kind=kind, metadata=metadata, spec=spec)


def parse_bundle(
    document: dict[str, Any],
    api_version: str,
    default_folder: str | None = None,
) -> list[Resource]:
    """
    Parse a document that may declare one folder for many dashboards.

    A bundle looks like ``{"grafanaDashboardFolder": "ops",
    "grafanaDashboards": {"a.json": {...}, ...}}``. Anything else is
    parsed as a single document. ``default_folder`` applies when the
    bundle declares no folder of its own.
    """
    if isinstance(document, dict) and BUNDLE_DASHBOARDS_FIELD in document:
        folder = document.get(BUNDLE_FOLDER_FIELD, default_folder)
        dashboards = document[BUNDLE_DASHBOARDS_FIELD]
        if not isinstance(dashboards, dict):
            raise ResourceParseError(f"{BUNDLE_DASHBOARDS_FIELD} must be a mapping")
        return [
            parse_document(dashboards[key], api_version, default_folder=folder)
            for key in sorted(dashboards)
        ]
    return [parse_document(document, api_version, default_folder=default_folder)]


def unprepare(resource: Resource) -> Resource:
    """Strip remote-applied transient fields, ready for comparison or storage."""
    return resource.without_spec(*TRANSIENT_SPEC_FIELDS)


def prepare(existing: Resource | None, resource: Resource) -> Resource:
    """
    Build the copy of ``resource`` that is sent to the remote service.

    ``existing`` is the current remote version, if any. The remote
    service keys updates on ``uid`` alone, so nothing from it is carried
    over.
    """
    return resource.without_spec("id").with_spec("uid", resource.name)


__all__ = [
    "DASHBOARD_GLOB",
    "DASHBOARD_KIND",
    "DASHBOARD_PATTERN",
    "files_under",
    "folder_for_path",
    "parse_bundle",
    "parse_document",
    "path_for",
    "prepare",
    "unprepare",
]
