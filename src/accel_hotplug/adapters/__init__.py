"""Adapters layer - concrete implementations of port interfaces.

- Inbound adapters: handle incoming requests (CLI)
- Outbound adapters: implement host dependencies (sysfs)
"""

from accel_hotplug.adapters.outbound import (
    MockDeviceResolver,
    SysfsDeviceHandle,
    SysfsDeviceResolver,
)

__all__ = [
    # Outbound adapters
    "MockDeviceResolver",
    "SysfsDeviceHandle",
    "SysfsDeviceResolver",
]
