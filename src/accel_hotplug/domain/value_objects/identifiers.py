"""Device identifiers and hardware identity for the hotplug domain.

These value objects describe which PCI function an operation targets and
which vendor/device pair marks the accelerator in the bus topology.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import NewType


# PCI address of a single function (e.g., "0000:65:00.1")
PCIeBusId = NewType("PCIeBusId", str)

# PCI address of a slot without the function number (e.g., "0000:65:00")
PCIeSlotId = NewType("PCIeSlotId", str)

_BDF_PATTERN = re.compile(
    r"^(?:(?P<domain>[0-9a-fA-F]{1,4}):)?"
    r"(?P<bus>[0-9a-fA-F]{1,2}):"
    r"(?P<device>[0-9a-fA-F]{1,2})"
    r"(?:\.(?P<function>[0-7]))?$"
)


class FunctionRole(Enum):
    """Which PCI function of the card an operation addresses."""
    MANAGEMENT = "management"
    USER = "user"

    @property
    def is_management(self) -> bool:
        return self is FunctionRole.MANAGEMENT


@dataclass(frozen=True, slots=True)
class DeviceReference:
    """Logical device index plus the function role.

    Attributes:
        index: Position of the card among the accelerator slots on the host.
        role: Management or user function.
    """

    index: int
    role: FunctionRole

    def __post_init__(self) -> None:
        if self.index < 0:
            raise ValueError(f"index must be non-negative, got {self.index}")

    def __str__(self) -> str:
        return f"{self.role.value}[{self.index}]"


@dataclass(frozen=True, slots=True)
class HardwareIdentity:
    """Vendor/device identifier pair as read from sysfs (hex strings)."""

    vendor_id: str
    device_id: str

    def matches(self, vendor_id: str, device_id: str) -> bool:
        """Both identifiers must be equal; a partial match is no match."""
        return self.vendor_id == vendor_id and self.device_id == device_id


XILINX_VENDOR_ID = "0x10ee"
XILINX_US_DEVICE_ID = "0x9134"

# Upstream-visible function of the accelerator, used to find its root port
ACCELERATOR_IDENTITY = HardwareIdentity(
    vendor_id=XILINX_VENDOR_ID,
    device_id=XILINX_US_DEVICE_ID,
)


@dataclass(frozen=True, slots=True)
class PciAddress:
    """Parsed domain:bus:device.function address."""

    domain: int
    bus: int
    device: int
    function: int | None = None

    @classmethod
    def parse(cls, text: str) -> PciAddress:
        """Parse ``[dddd:]bb:dd[.f]``; the domain defaults to 0.

        Raises:
            ValueError: If the text is not a PCI address.
        """
        match = _BDF_PATTERN.match(text.strip())
        if match is None:
            raise ValueError(f"Invalid PCI address: {text!r}")
        function = match.group("function")
        return cls(
            domain=int(match.group("domain") or "0", 16),
            bus=int(match.group("bus"), 16),
            device=int(match.group("device"), 16),
            function=int(function) if function is not None else None,
        )

    @property
    def slot(self) -> PCIeSlotId:
        return PCIeSlotId(f"{self.domain:04x}:{self.bus:02x}:{self.device:02x}")

    def with_function(self, function: int) -> PCIeBusId:
        return PCIeBusId(f"{self.slot}.{function:x}")


def create_device_reference(index: int, is_management: bool) -> DeviceReference:
    """Create a device reference from an index and a role flag."""
    role = FunctionRole.MANAGEMENT if is_management else FunctionRole.USER
    return DeviceReference(index=index, role=role)
