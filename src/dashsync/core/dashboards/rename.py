"""
Dashboard rename without a native rename primitive.

The remote service cannot change a dashboard's UID in place, so a rename
is create-new, delete-old, fix-up. The new copy is first written under a
random placeholder title so it cannot collide with a dashboard already
using the final title, and so a half-finished rename never shows up
under the real name.

Sequence::

    1. fetch old_uid                      (NotFoundError propagates as-is)
    2. unprepare, set uid to new_uid
    3. title := random token
    4. create new_uid                     both copies exist from here on
    5. delete old_uid
    6. restore the real title on new_uid
    7. notify

The protocol is not transactional. Nothing is rolled back; a failed step
raises RenameError naming the step so the caller can resume.
"""

from __future__ import annotations

import base64
import logging
import secrets
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from dashsync.core.exceptions import DashSyncError, NotFoundError, RenameError
from dashsync.core.notifier import Notifier
from dashsync.core.resources.addressing import unprepare
from dashsync.core.resources.models import Resource

if TYPE_CHECKING:
    from dashsync.core.dashboards.handler import DashboardHandler

logger = logging.getLogger(__name__)

TOKEN_BYTES = 7


def random_title_token() -> str:
    """Seven random bytes, base64 encoded."""
    return base64.b64encode(secrets.token_bytes(TOKEN_BYTES)).decode("ascii")


class RenameCoordinator:
    """
    Change a dashboard's UID.

    Args:
        handler: Handler providing get/add/update/delete for dashboards
        token_generator: Produces the placeholder title used in step 3

    Example:
        >>> coordinator = RenameCoordinator(handler)
        >>> coordinator.rename("abc", "xyz", Notifier())
    """

    def __init__(
        self,
        handler: DashboardHandler,
        token_generator: Callable[[], str] = random_title_token,
    ) -> None:
        self.handler = handler
        self.token_generator = token_generator

    def _step(
        self,
        step: str,
        old_uid: str,
        new_uid: str,
        action: Callable[..., Any],
        *args: Any,
    ) -> Any:
        try:
            return action(*args)
        except DashSyncError as e:
            logger.error(f"Rename {old_uid} -> {new_uid} failed at {step}: {e}")
            raise RenameError(step, old_uid, new_uid, cause=e) from e

    def rename(self, old_uid: str, new_uid: str, notifier: Notifier) -> Resource:
        """
        Rename ``old_uid`` to ``new_uid``.

        Returns:
            The resource as stored under ``new_uid``

        Raises:
            NotFoundError: If ``old_uid`` does not exist
            RenameError: If any later step fails
        """
        if not new_uid or old_uid == new_uid:
            raise RenameError("validate", old_uid, new_uid)

        try:
            resource = self.handler.get_by_uid(old_uid)
        except NotFoundError:
            raise
        except DashSyncError as e:
            raise RenameError("fetch", old_uid, new_uid, cause=e) from e

        renamed = unprepare(resource).with_metadata("name", new_uid).with_spec("uid", new_uid)
        title = renamed.get_spec_string("title")
        placeholder = renamed.with_spec("title", self.token_generator())
        logger.debug(f"Renaming {old_uid} -> {new_uid} via placeholder title")

        self._step("create", old_uid, new_uid, self.handler.add, placeholder)
        self._step("delete", old_uid, new_uid, self.handler.delete_by_uid, old_uid)

        restored = placeholder.with_spec("title", title)
        self._step("restore-title", old_uid, new_uid, self.handler.update, placeholder, restored)

        notifier.info(old_uid, f"renamed to {new_uid}")
        return restored


__all__ = ["RenameCoordinator", "TOKEN_BYTES", "random_title_token"]
