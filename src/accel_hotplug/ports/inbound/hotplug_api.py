"""Inbound port interface for the hotplug pipeline.

Inbound ports define what the system offers to external clients. The CLI
adapter drives this port.
"""

from __future__ import annotations

from typing import Callable, Optional, Protocol

from accel_hotplug.domain.entities.operation import HotplugResult, OperationRequest

ConfirmCallback = Callable[[OperationRequest], bool]


class HotplugAPI(Protocol):
    """Main API offered by the hotplug coordinator."""

    def execute(
        self,
        request: OperationRequest,
        confirm: Optional[ConfirmCallback] = None,
    ) -> HotplugResult:
        """Run the offline and/or online path of a request.

        Args:
            request: Parsed operator intent.
            confirm: Called once after validation and before any sysfs
                mutation. Returning False cancels the run.

        Returns:
            Result with the completed steps and the first error, if any.
        """
        ...
