"""Removal controller: detach a PCI function from the bus."""

from __future__ import annotations

import logging

from accel_hotplug.domain.errors import AttributeWriteError
from accel_hotplug.domain.value_objects.identifiers import DeviceReference
from accel_hotplug.ports.outbound.device_handle import DeviceResolver, SysfsAttributeError

logger = logging.getLogger(__name__)

REMOVE_ATTRIBUTE = "remove"
REMOVE_REQUEST = "1"


class RemovalController:
    """Issue a one-shot write to a function's ``remove`` attribute.

    The kernel handles removal synchronously enough that no confirmation
    is polled for.
    """

    def __init__(self, resolver: DeviceResolver) -> None:
        self._resolver = resolver

    def remove(self, device: DeviceReference) -> None:
        """Remove one function of the card.

        Raises:
            AttributeWriteError: If the write fails.
        """
        handle = self._resolver.resolve(device.index, device.role.is_management)
        try:
            handle.put(REMOVE_ATTRIBUTE, REMOVE_REQUEST)
        except SysfsAttributeError as e:
            raise AttributeWriteError(
                str(e), attribute=REMOVE_ATTRIBUTE, os_errno=e.os_errno
            ) from e
        logger.info(f"Removed {device} at {handle.bus_id}")
