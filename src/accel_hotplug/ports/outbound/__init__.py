"""Outbound ports - interfaces for external dependencies.

The hotplug controllers depend on a device resolver and the handles it
returns for all sysfs access.
"""

from accel_hotplug.ports.outbound.device_handle import (
    DeviceHandle,
    DeviceResolver,
    SysfsAttributeError,
)

__all__ = [
    "DeviceHandle",
    "DeviceResolver",
    "SysfsAttributeError",
]
