"""
Data models for the sync service.

Defines Pydantic models for pull/push results and local/remote diffs.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class DiffStatus(str, Enum):
    """How a local resource compares with its remote counterpart."""

    ADDED = "added"
    CHANGED = "changed"
    UNCHANGED = "unchanged"


class ResourceDiff(BaseModel):
    """Comparison result for one local resource."""

    key: str = Field(..., description="Resource key, e.g. 'Dashboard.abc'")
    status: DiffStatus
    path: str = Field(default="", description="Local file the resource came from")


class SyncError(BaseModel):
    """A per-resource failure collected during a pull or push."""

    subject: str = Field(..., description="Resource key or file path")
    message: str


class SyncResult(BaseModel):
    """
    Outcome of a pull or push.

    Example:
        >>> result = SyncResult(written=["Dashboard.abc"])
        >>> result.success
        True
    """

    written: list[str] = Field(
        default_factory=list,
        description="Keys written locally (pull) or created remotely (push)",
    )
    updated: list[str] = Field(
        default_factory=list,
        description="Keys updated remotely (push)",
    )
    unchanged: list[str] = Field(default_factory=list)
    errors: list[SyncError] = Field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors
