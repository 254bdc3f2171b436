"""
Reading and writing resource files.

Resources are stored as manifests in JSON or YAML. JSON output is
stable (sorted keys, two-space indent, trailing newline) so that content
comparison can be done on the serialized text.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from dashsync.core.exceptions import ResourceParseError
from dashsync.core.resources.models import Resource

FORMATS = ("json", "yaml")
YAML_SUFFIXES = (".yaml", ".yml")


def dump_resource(resource: Resource, fmt: str = "json") -> str:
    """
    Serialize a resource manifest.

    Args:
        resource: Resource to serialize
        fmt: ``json`` or ``yaml``

    Raises:
        ValueError: If the format is unknown
    """
    manifest = resource.to_manifest()
    if fmt == "json":
        return json.dumps(manifest, indent=2, sort_keys=True) + "\n"
    if fmt == "yaml":
        return yaml.safe_dump(manifest, sort_keys=True, default_flow_style=False)
    raise ValueError(f"Unknown resource format '{fmt}', expected one of {FORMATS}")


def load_file(path: Path) -> list[dict[str, Any]]:
    """
    Load every document in a resource file.

    JSON files hold exactly one document; YAML files may hold several
    (``---`` separated). Empty YAML documents are skipped.

    Raises:
        ResourceParseError: If the file cannot be read or parsed
    """
    try:
        text = path.read_text()
    except OSError as e:
        raise ResourceParseError(f"Cannot read {path}: {e}", path=str(path)) from e

    try:
        if path.suffix in YAML_SUFFIXES:
            documents = [doc for doc in yaml.safe_load_all(text) if doc is not None]
        else:
            documents = [json.loads(text)]
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ResourceParseError(f"Invalid content in {path}: {e}", path=str(path)) from e

    for doc in documents:
        if not isinstance(doc, dict):
            raise ResourceParseError(f"{path} must contain mappings", path=str(path))
    return documents


def write_if_changed(path: Path, content: str) -> bool:
    """
    Write ``content`` to ``path`` unless the file already holds it.

    Returns:
        True if the file was written
    """
    if path.exists() and path.read_text() == content:
        return False
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    return True
