"""
Data models for synchronized resources.

Defines the Resource model (the local, kind-tagged representation of a
remote object) and the raw payload shapes returned by the remote service.
"""

from __future__ import annotations

import copy
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from dashsync.core.exceptions import MalformedResponseError

GENERAL_FOLDER_UID = ""
GENERAL_FOLDER_ID = 0


class Resource(BaseModel):
    """
    A kind-tagged document with identity, metadata and spec.

    ``metadata["name"]`` is the remote identity (the dashboard UID) and
    ``metadata["folder"]`` is the folder UID assigned by the addressing
    layer. The remote payload never carries ``folder`` in its spec.

    Resources behave as values: the ``with_*`` helpers return modified
    copies and never mutate the instance they are called on.

    Example:
        >>> resource = Resource(
        ...     api_version="grizzly.grafana.com/v1alpha1",
        ...     kind="Dashboard",
        ...     metadata={"name": "abc", "folder": "team-x"},
        ...     spec={"uid": "abc", "title": "Sales"},
        ... )
        >>> resource.key
        'Dashboard.abc'
    """

    model_config = ConfigDict(populate_by_name=True)

    api_version: str = Field(..., alias="apiVersion")
    kind: str
    metadata: dict[str, Any] = Field(default_factory=dict)
    spec: dict[str, Any] = Field(default_factory=dict)

    @property
    def name(self) -> str:
        return str(self.metadata.get("name", ""))

    @property
    def key(self) -> str:
        return f"{self.kind}.{self.name}"

    @property
    def title(self) -> str:
        return str(self.spec.get("title", ""))

    def get_metadata(self, key: str, default: Any = None) -> Any:
        return self.metadata.get(key, default)

    def has_metadata(self, key: str) -> bool:
        return key in self.metadata

    def get_spec_string(self, key: str) -> str:
        value = self.spec.get(key)
        return value if isinstance(value, str) else ""

    def with_metadata(self, key: str, value: Any) -> Resource:
        """Return a copy with one metadata key set."""
        metadata = dict(self.metadata)
        metadata[key] = value
        return self.model_copy(update={"metadata": metadata})

    def with_spec(self, key: str, value: Any) -> Resource:
        """Return a copy with one top-level spec field set."""
        spec = copy.deepcopy(self.spec)
        spec[key] = value
        return self.model_copy(update={"spec": spec})

    def without_spec(self, *keys: str) -> Resource:
        """Return a copy with the given top-level spec fields removed."""
        spec = {k: copy.deepcopy(v) for k, v in self.spec.items() if k not in keys}
        return self.model_copy(update={"spec": spec})

    def to_manifest(self) -> dict[str, Any]:
        """Serialize to the on-disk manifest shape."""
        return {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "metadata": copy.deepcopy(self.metadata),
            "spec": copy.deepcopy(self.spec),
        }


class Folder(BaseModel):
    """
    A remote folder.

    UID ``""`` (numeric id ``0``) is the General folder. It is implicit on
    the remote side and is never created or fetched as a real folder.
    """

    uid: str
    title: str
    id: int | None = None

    @property
    def is_general(self) -> bool:
        return self.uid == GENERAL_FOLDER_UID or self.id == GENERAL_FOLDER_ID


class DashboardMeta(BaseModel):
    """
    The ``meta`` block of a fetched dashboard.

    Carries three independent and possibly stale hints about folder
    membership: ``folder_id`` (legacy), ``folder_uid`` (preferred) and
    ``folder_url``.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    folder_id: int = Field(default=GENERAL_FOLDER_ID, alias="folderId")
    folder_uid: str = Field(default="", alias="folderUid")
    folder_url: str = Field(default="", alias="folderUrl")
    folder_title: str = Field(default="", alias="folderTitle")
    version: int | None = None
    url: str = ""
    slug: str = ""


class DashboardWrapper(BaseModel):
    """Raw fetch result: the dashboard spec plus its ``meta`` block."""

    dashboard: dict[str, Any]
    folder_id: int = GENERAL_FOLDER_ID
    meta: DashboardMeta = Field(default_factory=DashboardMeta)

    @classmethod
    def from_api(cls, payload: Any) -> DashboardWrapper:
        """
        Build a wrapper from a ``GET /dashboards/uid/{uid}`` payload.

        Older API versions expose ``folderId`` at the top level, newer ones
        only inside ``meta``. Either is accepted.

        Raises:
            MalformedResponseError: If the payload is not a dashboard envelope
        """
        if not isinstance(payload, dict) or not isinstance(payload.get("dashboard"), dict):
            raise MalformedResponseError("Dashboard payload has no 'dashboard' object")
        raw_meta = payload.get("meta") or {}
        try:
            meta = DashboardMeta.model_validate(raw_meta)
            folder_id = payload.get("folderId", meta.folder_id)
            return cls(dashboard=payload["dashboard"], folder_id=folder_id, meta=meta)
        except ValidationError as e:
            raise MalformedResponseError(f"Invalid dashboard meta: {e}") from e

    @property
    def uid(self) -> str:
        uid = self.dashboard.get("uid")
        return uid if isinstance(uid, str) else ""


class SnapshotResult(BaseModel):
    """URLs returned when a snapshot preview is created."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    url: str
    delete_url: str = Field(..., alias="deleteUrl")
    key: str = ""
