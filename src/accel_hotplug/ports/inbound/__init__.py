"""Inbound ports - APIs offered to clients."""

from accel_hotplug.ports.inbound.hotplug_api import ConfirmCallback, HotplugAPI

__all__ = [
    "ConfirmCallback",
    "HotplugAPI",
]
