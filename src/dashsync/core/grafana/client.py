"""
HTTP client for the Grafana API.

Implements the primitive remote operations the sync workflows are built
on. Every httpx failure is mapped onto the dashsync exception tree:

- 404 -> NotFoundError
- other HTTP status, connection or timeout errors -> TransportError
- undecodable or unexpected payloads -> MalformedResponseError

Transient failures are retried first (see ``dashsync.core.grafana.http``).

Example:
    >>> from dashsync.core.config import GrafanaConfig
    >>> with GrafanaClient(GrafanaConfig(url="http://localhost:3000")) as client:
    ...     wrapper = client.get_dashboard("abc")
    ...     print(wrapper.dashboard["title"])
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from dashsync.core.config.models import GrafanaConfig
from dashsync.core.exceptions import MalformedResponseError, NotFoundError, TransportError
from dashsync.core.grafana.http import RetryConfig, with_retry
from dashsync.core.resources.models import (
    GENERAL_FOLDER_ID,
    DashboardWrapper,
    Folder,
    Resource,
    SnapshotResult,
)

logger = logging.getLogger(__name__)

USER_AGENT = "dashsync"


def _error_detail(response: httpx.Response) -> str:
    """Best-effort extraction of Grafana's ``message`` field."""
    try:
        body = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return response.text[:200]


class GrafanaClient:
    """
    Gateway to a Grafana instance's HTTP API.

    Args:
        config: Connection settings
        transport: Optional httpx transport (tests pass ``httpx.MockTransport``)
        retry: Retry policy; defaults to ``config.max_retries`` attempts
    """

    SEARCH_PAGE_SIZE = 1000

    def __init__(
        self,
        config: GrafanaConfig,
        transport: httpx.BaseTransport | None = None,
        retry: RetryConfig | None = None,
    ) -> None:
        self.config = config
        self._retry = retry or RetryConfig(max_retries=config.max_retries)

        headers = {"User-Agent": USER_AGENT, "Accept": "application/json"}
        auth: tuple[str, str] | None = None
        if config.token:
            if config.user:
                auth = (config.user, config.token)
            else:
                headers["Authorization"] = f"Bearer {config.token}"

        self._extensions: dict[str, Any] = {}
        if config.tls_host and config.insecure_skip_verify and config.url.startswith("https://"):
            self._extensions["sni_hostname"] = config.tls_host

        self._http = httpx.Client(
            base_url=f"{config.url}/api",
            headers=headers,
            auth=auth,
            timeout=config.timeout,
            verify=not config.insecure_skip_verify,
            transport=transport,
        )

    def __enter__(self) -> GrafanaClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._http.close()

    def _request(
        self,
        method: str,
        path: str,
        *,
        what: str | None = None,
        **kwargs: Any,
    ) -> Any:
        """
        Send a request and decode its JSON body.

        Args:
            method: HTTP method
            path: Path relative to ``<url>/api``
            what: Description used in error messages (e.g. "dashboard abc")

        Returns:
            Decoded JSON, or None for an empty body
        """
        what = what or f"{method} {path}"

        @with_retry(self._retry)
        def send() -> httpx.Response:
            response = self._http.request(method, path, extensions=self._extensions, **kwargs)
            response.raise_for_status()
            return response

        logger.debug(f"{method} {path}")
        try:
            response = send()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            if status == 404:
                raise NotFoundError(f"{what} not found", path=path) from e
            raise TransportError(
                f"{what} failed with HTTP {status}: {_error_detail(e.response)}",
                status_code=status,
                path=path,
            ) from e
        except httpx.HTTPError as e:
            raise TransportError(f"{what} failed: {e}", path=path) from e

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise MalformedResponseError(f"{what} returned invalid JSON", path=path) from e

    # ------------------------------------------------------------------
    # Dashboards
    # ------------------------------------------------------------------

    def get_dashboard(self, uid: str) -> DashboardWrapper:
        """Fetch a dashboard by UID."""
        payload = self._request("GET", f"/dashboards/uid/{uid}", what=f"Dashboard {uid}")
        return DashboardWrapper.from_api(payload)

    def list_dashboard_uids(self) -> list[str]:
        """List the UIDs of every dashboard, following search pagination."""
        uids: list[str] = []
        page = 1
        while True:
            results = self._request(
                "GET",
                "/search",
                what="Dashboard search",
                params={"type": "dash-db", "limit": self.SEARCH_PAGE_SIZE, "page": page},
            )
            if not isinstance(results, list):
                raise MalformedResponseError("Dashboard search did not return a list")
            for item in results:
                if not isinstance(item, dict) or not isinstance(item.get("uid"), str):
                    raise MalformedResponseError("Dashboard search result has no uid")
                uids.append(item["uid"])
            if len(results) < self.SEARCH_PAGE_SIZE:
                return uids
            page += 1

    def post_dashboard(self, resource: Resource, overwrite: bool = True) -> dict[str, Any]:
        """
        Create or replace a dashboard.

        The folder comes from ``metadata["folder"]``; an empty or missing
        folder places the dashboard in General. With ``overwrite=False``
        Grafana answers 412 when the UID is taken, which surfaces as a
        ``TransportError`` with ``status_code == 412``.
        """
        body: dict[str, Any] = {"dashboard": resource.spec, "overwrite": overwrite}
        folder_uid = resource.get_metadata("folder")
        if folder_uid:
            body["folderUid"] = folder_uid
        result = self._request("POST", "/dashboards/db", what=f"Saving {resource.key}", json=body)
        return result if isinstance(result, dict) else {}

    def delete_dashboard(self, uid: str) -> None:
        """Delete a dashboard by UID."""
        self._request("DELETE", f"/dashboards/uid/{uid}", what=f"Dashboard {uid}")

    # ------------------------------------------------------------------
    # Folders
    # ------------------------------------------------------------------

    def _to_folder(self, payload: Any, what: str) -> Folder:
        try:
            return Folder.model_validate(payload)
        except ValidationError as e:
            raise MalformedResponseError(f"{what} payload is not a folder: {e}") from e

    def get_folder_by_id(self, folder_id: int) -> Folder:
        """Fetch a folder by its legacy numeric id."""
        if folder_id == GENERAL_FOLDER_ID:
            raise NotFoundError("The General folder is not a real folder", folder_id=folder_id)
        what = f"Folder {folder_id}"
        return self._to_folder(self._request("GET", f"/folders/id/{folder_id}", what=what), what)

    def get_folder(self, uid: str) -> Folder:
        """Fetch a folder by UID."""
        if not uid:
            raise NotFoundError("The General folder is not a real folder")
        what = f"Folder {uid}"
        return self._to_folder(self._request("GET", f"/folders/{uid}", what=what), what)

    def create_folder(self, folder: Folder) -> Folder:
        """
        Create a folder.

        Raises:
            ValueError: If asked to create the General folder
        """
        if folder.is_general:
            raise ValueError("The General folder cannot be created")
        what = f"Creating folder {folder.uid}"
        payload = self._request(
            "POST", "/folders", what=what, json={"uid": folder.uid, "title": folder.title}
        )
        return self._to_folder(payload, what)

    # ------------------------------------------------------------------
    # Snapshots & health
    # ------------------------------------------------------------------

    def create_snapshot(self, resource: Resource, expires_seconds: int = 0) -> SnapshotResult:
        """Publish a snapshot of a dashboard for previewing."""
        body: dict[str, Any] = {"dashboard": resource.spec}
        if expires_seconds > 0:
            body["expires"] = expires_seconds
        payload = self._request(
            "POST", "/snapshots", what=f"Snapshot of {resource.key}", json=body
        )
        try:
            return SnapshotResult.model_validate(payload)
        except ValidationError as e:
            raise MalformedResponseError(f"Invalid snapshot response: {e}") from e

    def health(self) -> dict[str, Any]:
        """Query the health endpoint."""
        payload = self._request("GET", "/health", what="Health check")
        return payload if isinstance(payload, dict) else {}


__all__ = ["GrafanaClient"]
