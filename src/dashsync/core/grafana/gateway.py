"""
Remote gateway protocol.

The dashboard workflows depend only on this interface, so they can run
against the HTTP client or an in-memory double.
"""

from typing import Any, Protocol, runtime_checkable

from dashsync.core.resources.models import DashboardWrapper, Folder, Resource, SnapshotResult


@runtime_checkable
class RemoteGateway(Protocol):
    """
    Primitive operations against the remote visualization service.

    Implementations raise ``NotFoundError`` for absent objects,
    ``TransportError`` when the service cannot be reached and
    ``MalformedResponseError`` for payloads of unexpected shape.
    """

    def get_dashboard(self, uid: str) -> DashboardWrapper:
        """Fetch a dashboard by UID."""
        ...

    def list_dashboard_uids(self) -> list[str]:
        """List every dashboard UID."""
        ...

    def post_dashboard(self, resource: Resource, overwrite: bool = True) -> dict[str, Any]:
        """Create a dashboard, replacing an existing one only when ``overwrite`` is set."""
        ...

    def delete_dashboard(self, uid: str) -> None:
        """Delete a dashboard by UID."""
        ...

    def get_folder_by_id(self, folder_id: int) -> Folder:
        """Fetch a folder by numeric id."""
        ...

    def get_folder(self, uid: str) -> Folder:
        """Fetch a folder by UID."""
        ...

    def create_folder(self, folder: Folder) -> Folder:
        """Create a folder."""
        ...

    def create_snapshot(self, resource: Resource, expires_seconds: int = 0) -> SnapshotResult:
        """Publish a snapshot of a dashboard."""
        ...
