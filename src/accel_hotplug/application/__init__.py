"""Application layer for accelerator hotplug.

Orchestrates domain services to provide the hotplug pipeline.
"""

from accel_hotplug.application.coordinator import HotplugCoordinator

__all__ = [
    "HotplugCoordinator",
]
