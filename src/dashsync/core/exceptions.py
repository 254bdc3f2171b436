"""
Custom exceptions for dashsync.

This module defines the exception hierarchy shared by the gateway, the
addressing layer and the dashboard workflows. Every error carries a
human-readable message plus optional keyword context.

Exception Hierarchy:
    DashSyncError (base)
    ├── RemoteError (remote service errors)
    │   ├── NotFoundError (resource or folder absent remotely)
    │   ├── TransportError (network/auth/HTTP failures)
    │   └── MalformedResponseError (unexpected payload shape)
    ├── AddressingError (resource cannot be located on disk)
    ├── ResourceParseError (local document cannot become a Resource)
    ├── RenameError (a rename step failed)
    └── ConfigError (invalid or missing configuration)

Example:
    >>> from dashsync.core.exceptions import NotFoundError
    >>> try:
    ...     raise NotFoundError("Dashboard not found", uid="abc")
    ... except NotFoundError as e:
    ...     print(f"{e} ({e.context['uid']})")
    Dashboard not found (abc)
"""


class DashSyncError(Exception):
    """
    Base exception for all dashsync errors.

    Attributes:
        message: Human-readable error message
        context: Optional dictionary of additional context
    """

    def __init__(self, message: str, **context: object) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        return self.message


class RemoteError(DashSyncError):
    """Base exception for failures talking to the remote service."""


class NotFoundError(RemoteError):
    """
    Raised when a dashboard or folder does not exist remotely.

    Example:
        >>> raise NotFoundError("Dashboard abc not found", uid="abc")
    """


class TransportError(RemoteError):
    """
    Raised when the remote service cannot be reached or refuses a request.

    Covers connection failures, timeouts, authentication failures and any
    non-404 HTTP error status. The original httpx exception is preserved
    via ``__cause__``.
    """

    def __init__(self, message: str, status_code: int | None = None, **context: object) -> None:
        super().__init__(message, status_code=status_code, **context)
        self.status_code = status_code


class MalformedResponseError(RemoteError):
    """Raised when the remote service returns a payload of unexpected shape."""


class AddressingError(DashSyncError):
    """
    Raised when a resource cannot be mapped to a file path.

    A resource must be folder-resolved (carry ``folder`` metadata) before
    it can be located on disk.
    """


class ResourceParseError(DashSyncError):
    """
    Raised when a local document cannot be turned into a Resource.

    Example:
        >>> raise ResourceParseError(
        ...     "Dashboard has no uid",
        ...     path="dashboards/team-x/dashboard-abc.json",
        ... )
    """


class RenameError(DashSyncError):
    """
    Raised when a step of the rename protocol fails.

    No rollback is attempted, so the remote state after a failure depends
    on ``step``:

    - ``create``: nothing changed remotely
    - ``delete``: both identities exist (old title, placeholder title)
    - ``restore-title``: only the new identity exists, with the placeholder title

    Attributes:
        step: Name of the step that failed
        old_uid: UID being renamed
        new_uid: Target UID
        cause: The original exception, also available as ``__cause__``
    """

    def __init__(
        self,
        step: str,
        old_uid: str,
        new_uid: str,
        cause: BaseException | None = None,
    ) -> None:
        detail = f": {cause}" if cause is not None else ""
        super().__init__(
            f"Rename {old_uid} -> {new_uid} failed at step '{step}'{detail}",
            step=step,
            old_uid=old_uid,
            new_uid=new_uid,
        )
        self.step = step
        self.old_uid = old_uid
        self.new_uid = new_uid
        self.cause = cause


class ConfigError(DashSyncError):
    """Raised when configuration is missing or invalid."""


__all__ = [
    "DashSyncError",
    "RemoteError",
    "NotFoundError",
    "TransportError",
    "MalformedResponseError",
    "AddressingError",
    "ResourceParseError",
    "RenameError",
    "ConfigError",
]
