"""Device Handle port for sysfs attribute access.

This outbound port defines how the hotplug controllers reach a single PCI
function's control directory. The controllers never build sysfs paths
themselves; they resolve a handle and go through it.

References:
    - Documentation/ABI/testing/sysfs-bus-pci (kernel tree)
"""

from __future__ import annotations

from abc import abstractmethod
from pathlib import Path
from typing import Protocol, TypeVar

T = TypeVar("T")


class SysfsAttributeError(Exception):
    """Raised when a sysfs attribute cannot be read or written.

    Attributes:
        attribute: Attribute name relative to the handle's directory.
        os_errno: errno of the failing call, or None when the content was
            unparseable rather than unreadable.
    """

    def __init__(self, message: str, attribute: str, os_errno: int | None = None) -> None:
        super().__init__(message)
        self.attribute = attribute
        self.os_errno = os_errno


class DeviceHandle(Protocol):
    """Protocol for attribute access on one PCI function.

    Handles are cheap, stateless and created per controller call.
    """

    @property
    @abstractmethod
    def bus_id(self) -> str:
        """Return the PCI address this handle is bound to."""
        ...

    @abstractmethod
    def path(self, attribute: str = "") -> Path:
        """Return the path of an attribute (or of the directory itself)."""
        ...

    @abstractmethod
    def exists(self, attribute: str) -> bool:
        """Return True if the attribute is present."""
        ...

    @abstractmethod
    def get(self, attribute: str, kind: type[T]) -> T:
        """Read an attribute and convert it.

        Args:
            attribute: Attribute name.
            kind: Conversion callable, e.g. ``int`` or ``str``.

        Raises:
            SysfsAttributeError: If the read or the conversion fails.
        """
        ...

    @abstractmethod
    def put(self, attribute: str, value: str) -> None:
        """Write a value to an attribute.

        Raises:
            SysfsAttributeError: If the open or the write fails.
        """
        ...


class DeviceResolver(Protocol):
    """Protocol for turning operator identifiers into device handles."""

    @abstractmethod
    def index_for(self, identifier: str) -> int:
        """Resolve a BDF string or a decimal index to a device index.

        Raises:
            DeviceNotFoundError: If no accelerator matches.
        """
        ...

    @abstractmethod
    def resolve(self, index: int, is_management: bool) -> DeviceHandle:
        """Return a handle for the management or user function of a card.

        Raises:
            DeviceNotFoundError: If the index is out of range.
        """
        ...
