"""
Pytest configuration and shared fixtures.

Provides an in-memory remote gateway, handler/notifier fixtures, sample
dashboards and an isolated configuration environment.
"""

import copy
from typing import Any
from unittest.mock import Mock

import pytest

from dashsync.core.config import clear_cache
from dashsync.core.dashboards.handler import DashboardHandler
from dashsync.core.exceptions import NotFoundError, TransportError
from dashsync.core.notifier import Notifier
from dashsync.core.resources.models import (
    DashboardMeta,
    DashboardWrapper,
    Folder,
    Resource,
    SnapshotResult,
)

API_VERSION = "grizzly.grafana.com/v1alpha1"


# ==============================================================================
# Fake Remote Gateway
# ==============================================================================


class FakeGateway:
    """
    In-memory stand-in for the Grafana API.

    Stores dashboards by UID the way the server does (adding ``id`` and
    ``version``) and records every call. A post without ``overwrite`` onto
    an existing UID fails with HTTP 412 like Grafana. Set
    ``fail_on[<method>]`` to an exception to make that method raise it.
    """

    def __init__(self) -> None:
        self.dashboards: dict[str, dict[str, Any]] = {}
        self.dashboard_folders: dict[str, str] = {}
        self.folders: dict[str, Folder] = {}
        self.calls: list[tuple[str, Any]] = []
        self.fail_on: dict[str, Exception] = {}
        self.overwrites: list[bool] = []
        self._next_id = 1

    def _record(self, method: str, arg: Any = None) -> None:
        self.calls.append((method, arg))
        if method in self.fail_on:
            raise self.fail_on[method]

    def _new_id(self) -> int:
        self._next_id += 1
        return self._next_id

    def seed_folder(self, uid: str, title: str | None = None) -> Folder:
        folder = Folder(uid=uid, title=title or uid, id=self._new_id())
        self.folders[uid] = folder
        return folder

    def seed_dashboard(self, spec: dict[str, Any], folder_uid: str = "") -> None:
        if folder_uid and folder_uid not in self.folders:
            self.seed_folder(folder_uid)
        stored = copy.deepcopy(spec)
        stored.setdefault("id", self._new_id())
        stored.setdefault("version", 1)
        self.dashboards[stored["uid"]] = stored
        self.dashboard_folders[stored["uid"]] = folder_uid

    def titles(self) -> dict[str, str]:
        return {uid: spec.get("title", "") for uid, spec in self.dashboards.items()}

    # RemoteGateway -----------------------------------------------------

    def get_dashboard(self, uid: str) -> DashboardWrapper:
        self._record("get_dashboard", uid)
        if uid not in self.dashboards:
            raise NotFoundError(f"Dashboard {uid} not found")
        folder_uid = self.dashboard_folders.get(uid, "")
        folder = self.folders.get(folder_uid)
        folder_id = folder.id if folder and folder.id is not None else 0
        return DashboardWrapper(
            dashboard=copy.deepcopy(self.dashboards[uid]),
            folder_id=folder_id,
            meta=DashboardMeta(folder_id=folder_id, folder_uid=folder_uid),
        )

    def list_dashboard_uids(self) -> list[str]:
        self._record("list_dashboard_uids")
        return sorted(self.dashboards)

    def post_dashboard(self, resource: Resource, overwrite: bool = True) -> dict[str, Any]:
        self._record("post_dashboard", resource)
        self.overwrites.append(overwrite)
        spec = copy.deepcopy(resource.spec)
        previous = self.dashboards.get(spec["uid"])
        if previous and not overwrite:
            raise TransportError(
                f"Saving {resource.key} failed with HTTP 412: dashboard already exists",
                status_code=412,
            )
        spec["id"] = previous["id"] if previous else self._new_id()
        spec["version"] = previous["version"] + 1 if previous else 1
        self.dashboards[spec["uid"]] = spec
        self.dashboard_folders[spec["uid"]] = resource.get_metadata("folder") or ""
        return {"status": "success", "uid": spec["uid"]}

    def delete_dashboard(self, uid: str) -> None:
        self._record("delete_dashboard", uid)
        if uid not in self.dashboards:
            raise NotFoundError(f"Dashboard {uid} not found")
        del self.dashboards[uid]
        self.dashboard_folders.pop(uid, None)

    def get_folder_by_id(self, folder_id: int) -> Folder:
        self._record("get_folder_by_id", folder_id)
        for folder in self.folders.values():
            if folder.id == folder_id:
                return folder
        raise NotFoundError(f"Folder {folder_id} not found")

    def get_folder(self, uid: str) -> Folder:
        self._record("get_folder", uid)
        if uid not in self.folders:
            raise NotFoundError(f"Folder {uid} not found")
        return self.folders[uid]

    def create_folder(self, folder: Folder) -> Folder:
        self._record("create_folder", folder)
        created = Folder(uid=folder.uid, title=folder.title, id=self._new_id())
        self.folders[folder.uid] = created
        return created

    def create_snapshot(self, resource: Resource, expires_seconds: int = 0) -> SnapshotResult:
        self._record("create_snapshot", (resource, expires_seconds))
        return SnapshotResult(
            url=f"http://grafana.test/dashboard/snapshot/{resource.name}",
            delete_url=f"http://grafana.test/api/snapshots-delete/{resource.name}",
            key=resource.name,
        )


# ==============================================================================
# Directory Fixtures
# ==============================================================================


@pytest.fixture
def temp_dir(tmp_path):
    """Provide a temporary directory for tests."""
    return tmp_path


# ==============================================================================
# Remote Fixtures
# ==============================================================================


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def tokens() -> list[str]:
    """Deterministic placeholder titles handed out by the handler fixture."""
    return ["token-1", "token-2", "token-3"]


@pytest.fixture
def handler(gateway: FakeGateway, tokens: list[str]) -> DashboardHandler:
    return DashboardHandler(
        gateway,
        API_VERSION,
        token_generator=lambda: tokens.pop(0),
        poll_interval=0.01,
    )


@pytest.fixture
def notifier() -> Mock:
    return Mock(spec=Notifier)


# ==============================================================================
# Sample Data Fixtures
# ==============================================================================


@pytest.fixture
def sales_dashboard() -> dict[str, Any]:
    return {"uid": "abc", "title": "Sales", "panels": [{"id": 1, "type": "graph"}]}


@pytest.fixture
def sales_resource(sales_dashboard: dict[str, Any]) -> Resource:
    return Resource(
        api_version=API_VERSION,
        kind="Dashboard",
        metadata={"name": "abc", "folder": "team-x"},
        spec=sales_dashboard,
    )


# ==============================================================================
# Config Isolation
# ==============================================================================


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep real user config and GRAFANA_* env vars out of every test."""
    for name in (
        "GRAFANA_URL",
        "GRAFANA_TOKEN",
        "GRAFANA_USER",
        "GRAFANA_INSECURE_SKIP_VERIFY",
        "GRAFANA_TLS_HOST",
        "DASHSYNC_POLL_INTERVAL",
        "DASHSYNC_OUTPUT_FORMAT",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    clear_cache()
    yield
    clear_cache()
