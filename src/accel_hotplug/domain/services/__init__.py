"""Domain services for the hotplug pipeline.

Services implement the individual hotplug steps:
- ShutdownController: write-then-poll quiesce of a function
- RemovalController: one-shot hot removal of a function
- RootPortLocator: two-level search for the accelerator's bridge
- RescanController: bus rescan below a root port
"""

from accel_hotplug.domain.services.removal_controller import RemovalController
from accel_hotplug.domain.services.rescan_controller import RescanController
from accel_hotplug.domain.services.root_port_locator import RootPortLocator
from accel_hotplug.domain.services.shutdown_controller import ShutdownController

__all__ = [
    "ShutdownController",
    "RemovalController",
    "RootPortLocator",
    "RescanController",
]
