"""Ports layer - interface definitions following Hexagonal Architecture.

- Inbound ports: APIs offered to clients (HotplugAPI)
- Outbound ports: dependencies on the host (DeviceResolver, DeviceHandle)

Adapters implement these ports with concrete functionality.
"""

from accel_hotplug.ports.inbound import ConfirmCallback, HotplugAPI
from accel_hotplug.ports.outbound import (
    DeviceHandle,
    DeviceResolver,
    SysfsAttributeError,
)

__all__ = [
    # Inbound ports
    "ConfirmCallback",
    "HotplugAPI",
    # Outbound ports
    "DeviceHandle",
    "DeviceResolver",
    "SysfsAttributeError",
]
