"""
Directory-level dashboard synchronization.

Example:
    >>> from dashsync.core.sync import SyncService
    >>> sync = SyncService(handler)
    >>> result = sync.push(Path("resources"))
    >>> if not result.success:
    ...     print(f"{len(result.errors)} dashboards failed")
"""

from dashsync.core.sync.models import DiffStatus, ResourceDiff, SyncError, SyncResult
from dashsync.core.sync.service import SyncService, same_content

__all__ = [
    "DiffStatus",
    "ResourceDiff",
    "SyncError",
    "SyncResult",
    "SyncService",
    "same_content",
]
