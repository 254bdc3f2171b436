"""
Folder resolution for fetched dashboards.

The API has exposed folder membership three different ways across
versions (numeric id, folder UID, folder URL). Resolution runs an
ordered chain of strategies; each returns a folder UID or ``None`` to
abstain, and the first answer wins. Resolution never fails: when no
strategy answers, the dashboard is treated as living in General ("").
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Sequence
from typing import Optional

from dashsync.core.exceptions import DashSyncError
from dashsync.core.resources.models import (
    GENERAL_FOLDER_ID,
    GENERAL_FOLDER_UID,
    DashboardWrapper,
    Folder,
)

logger = logging.getLogger(__name__)

FOLDER_URL_PATTERN = re.compile(r"/dashboards/f/([^/]+)")

FolderStrategy = Callable[[DashboardWrapper], Optional[str]]
FolderLookup = Callable[[int], Folder]


def general_folder(wrapper: DashboardWrapper) -> str | None:
    """Folder id 0 is General; nothing else is consulted."""
    if wrapper.folder_id == GENERAL_FOLDER_ID:
        return GENERAL_FOLDER_UID
    return None


def folder_uid_from_meta(wrapper: DashboardWrapper) -> str | None:
    return wrapper.meta.folder_uid or None


def folder_uid_from_url(wrapper: DashboardWrapper) -> str | None:
    """
    Extract the UID segment from a folder URL.

    Example:
        ``/dashboards/f/abc123/my-folder`` -> ``abc123``
    """
    match = FOLDER_URL_PATTERN.search(wrapper.meta.folder_url)
    return match.group(1) if match else None


def folder_uid_from_lookup(lookup: FolderLookup) -> FolderStrategy:
    """
    Build a strategy that asks the remote service for the folder by id.

    Any failure (not found, transport, malformed) resolves to General.
    """

    def resolve(wrapper: DashboardWrapper) -> str | None:
        try:
            folder = lookup(wrapper.folder_id)
        except DashSyncError as e:
            logger.debug(f"Folder {wrapper.folder_id} lookup failed: {e}")
            return GENERAL_FOLDER_UID
        return folder.uid

    return resolve


class FolderResolver:
    """
    Resolve the folder UID of a fetched dashboard.

    Example:
        >>> resolver = FolderResolver.default(client.get_folder_by_id)
        >>> resolver.resolve(client.get_dashboard("abc"))
        'team-x'
    """

    def __init__(self, strategies: Sequence[FolderStrategy]) -> None:
        self.strategies = list(strategies)

    @classmethod
    def default(cls, lookup: FolderLookup) -> FolderResolver:
        return cls(
            [
                general_folder,
                folder_uid_from_meta,
                folder_uid_from_url,
                folder_uid_from_lookup(lookup),
            ]
        )

    def resolve(self, wrapper: DashboardWrapper) -> str:
        for strategy in self.strategies:
            uid = strategy(wrapper)
            if uid is not None:
                return uid
        return GENERAL_FOLDER_UID


__all__ = [
    "FOLDER_URL_PATTERN",
    "FolderResolver",
    "folder_uid_from_lookup",
    "folder_uid_from_meta",
    "folder_uid_from_url",
    "general_folder",
]
