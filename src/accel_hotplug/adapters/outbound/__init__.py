"""Outbound adapters - implementations of outbound ports.

Provides the sysfs-backed device resolver used on real hosts and an
in-memory mock for testing and development.
"""

from accel_hotplug.adapters.outbound.mock_device import (
    AttributeAccess,
    MockDeviceHandle,
    MockDeviceResolver,
    MockFunctionState,
)
from accel_hotplug.adapters.outbound.sysfs_device import (
    SysfsDeviceHandle,
    SysfsDeviceResolver,
)

__all__ = [
    # sysfs
    "SysfsDeviceHandle",
    "SysfsDeviceResolver",
    # Mock
    "AttributeAccess",
    "MockDeviceHandle",
    "MockDeviceResolver",
    "MockFunctionState",
]
