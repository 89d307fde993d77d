"""Shutdown controller: quiesce a PCI function before hot removal.

Writing "1" to the function's ``shutdown`` attribute asks the driver to
stop the device. The driver reports completion by reading back 1 from the
same attribute, so the controller polls it at a fixed interval.

The poll budget is a fixed number of iterations (60 x 1 second by
default). Interval, budget and the sleep function are injectable so tests
can drive the loop without real waiting.
"""

from __future__ import annotations

import logging
import time
from typing import Callable

from accel_hotplug.domain.errors import (
    AttributeReadError,
    AttributeWriteError,
    DeviceNotFoundError,
    ShutdownTimeoutError,
)
from accel_hotplug.domain.value_objects.identifiers import DeviceReference
from accel_hotplug.ports.outbound.device_handle import DeviceResolver, SysfsAttributeError

logger = logging.getLogger(__name__)

SHUTDOWN_ATTRIBUTE = "shutdown"
SHUTDOWN_REQUEST = "1"
SHUTDOWN_DONE = 1

POLL_TIMEOUT = 60          # iterations
POLL_INTERVAL_SECONDS = 1.0


class ShutdownController:
    """Drive one function through the shutdown write-then-poll protocol."""

    def __init__(
        self,
        resolver: DeviceResolver,
        max_polls: int = POLL_TIMEOUT,
        poll_interval: float = POLL_INTERVAL_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if max_polls < 1:
            raise ValueError(f"max_polls must be at least 1, got {max_polls}")
        self._resolver = resolver
        self._max_polls = max_polls
        self._poll_interval = poll_interval
        self._sleep = sleep

    @property
    def max_polls(self) -> int:
        return self._max_polls

    def shutdown(self, device: DeviceReference) -> int:
        """Request shutdown and wait for the device to confirm it.

        Args:
            device: Function to shut down.

        Returns:
            Number of poll iterations it took to observe completion.

        Raises:
            DeviceNotFoundError: The ``shutdown`` attribute does not exist.
            AttributeWriteError: The shutdown request could not be written.
            AttributeReadError: The status could not be read back.
            ShutdownTimeoutError: Completion was not observed in time.
        """
        handle = self._resolver.resolve(device.index, device.role.is_management)

        if not handle.exists(SHUTDOWN_ATTRIBUTE):
            raise DeviceNotFoundError(
                f"{handle.path(SHUTDOWN_ATTRIBUTE)} does not exist"
            )

        try:
            handle.put(SHUTDOWN_ATTRIBUTE, SHUTDOWN_REQUEST)
        except SysfsAttributeError as e:
            raise AttributeWriteError(
                str(e), attribute=SHUTDOWN_ATTRIBUTE, os_errno=e.os_errno
            ) from e

        logger.info(f"Shutdown requested for {device} at {handle.bus_id}")

        for poll in range(1, self._max_polls + 1):
            self._sleep(self._poll_interval)
            try:
                status = handle.get(SHUTDOWN_ATTRIBUTE, int)
            except SysfsAttributeError as e:
                raise AttributeReadError(
                    str(e), attribute=SHUTDOWN_ATTRIBUTE, os_errno=e.os_errno
                ) from e

            if status == SHUTDOWN_DONE:
                logger.info(f"Shutdown of {handle.bus_id} completed after {poll} polls")
                return poll

            logger.debug(f"Shutdown of {handle.bus_id} pending (status={status}, poll={poll})")

        raise ShutdownTimeoutError(
            f"Shutdown of {handle.bus_id} did not complete after {self._max_polls} polls"
        )
