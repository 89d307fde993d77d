"""Hotplug error taxonomy.

Every failure the controllers can report is a HotplugError subclass. Each
carries the process exit status the command surfaces for it, so the
coordinator and the CLI never consult ambient errno state.

Exit statuses follow the errno values used by the xbmgmt tool:
EINVAL, ENOENT, ECANCELED, ETIMEDOUT, and EPERM. Rescan I/O failures
surface the errno of the failing system call.
"""

from __future__ import annotations

import errno


class HotplugError(Exception):
    """Base class for hotplug failures."""

    default_exit_code: int = errno.EINVAL

    def __init__(self, message: str, exit_code: int | None = None) -> None:
        super().__init__(message)
        self.exit_code = exit_code if exit_code is not None else self.default_exit_code


class InvalidArgumentError(HotplugError):
    """Request is malformed or an operation failed generically."""

    default_exit_code = errno.EINVAL


class DeviceNotFoundError(HotplugError):
    """Device reference or its control attribute does not exist."""

    default_exit_code = errno.ENOENT


class RootPortNotFoundError(DeviceNotFoundError):
    """No bridge with the accelerator as a direct child was found."""


class OperationCanceledError(HotplugError):
    """Operator declined to proceed."""

    default_exit_code = errno.ECANCELED


class PermissionDeniedError(HotplugError):
    """Command requires root privileges."""

    default_exit_code = errno.EPERM


class AttributeIOError(HotplugError):
    """Reading or writing a sysfs attribute failed.

    Attributes:
        attribute: Name of the sysfs attribute involved.
        os_errno: errno of the failed call, or None if the failure was not
            an OS error (for example unparseable content).
    """

    def __init__(
        self,
        message: str,
        attribute: str,
        os_errno: int | None = None,
        exit_code: int | None = None,
    ) -> None:
        super().__init__(message, exit_code)
        self.attribute = attribute
        self.os_errno = os_errno


class AttributeOpenError(AttributeIOError):
    """Attribute could not be opened for writing."""


class AttributeWriteError(AttributeIOError):
    """Attribute write or flush failed."""


class AttributeReadError(AttributeIOError):
    """Attribute read failed or returned unparseable content."""


class ShutdownTimeoutError(HotplugError):
    """Device did not report shutdown within the poll budget."""

    default_exit_code = errno.ETIMEDOUT
