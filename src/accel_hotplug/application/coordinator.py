"""Hotplug Application Coordinator.

Sequences the domain services into the hotplug pipeline:

    offline:  shutdown(user) -> remove(user) -> remove(management)
    online:   find_root_port() -> rescan(root_port)

Both paths may be requested together; offline always runs first. The
pipeline is straight-line: each failure stops it and nothing already done
is undone. A user function removed before a failed management removal
stays removed.

One failure is soft: a missing ``shutdown`` attribute means the device is
not exposed on this host (typically a VM guest). That is reported as
success and the run ends there.
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Any, Callable, Generator, Optional

from accel_hotplug.domain.entities.operation import (
    HotplugResult,
    OperationKind,
    OperationRequest,
    Step,
)
from accel_hotplug.domain.errors import (
    DeviceNotFoundError,
    HotplugError,
    InvalidArgumentError,
    OperationCanceledError,
)
from accel_hotplug.domain.services.removal_controller import RemovalController
from accel_hotplug.domain.services.rescan_controller import RescanController
from accel_hotplug.domain.services.root_port_locator import RootPortLocator
from accel_hotplug.domain.services.shutdown_controller import ShutdownController
from accel_hotplug.domain.value_objects.identifiers import create_device_reference
from accel_hotplug.infrastructure.logging import get_logger
from accel_hotplug.infrastructure.metrics import MetricsRegistry
from accel_hotplug.infrastructure.tracing import trace_span
from accel_hotplug.ports.inbound.hotplug_api import ConfirmCallback

logger = get_logger(__name__)

DEVICE_ABSENT_MESSAGE = (
    "INFO: Device entry doesn't exists. If you are running on VM Environment, \n"
    "Please shutdown the VM before performing this operation.\n"
)
SHUTDOWN_FAILED_MESSAGE = "Device Shutdown failed."


class HotplugCoordinator:
    """Runs hotplug requests with metrics and tracing."""

    def __init__(
        self,
        shutdown: ShutdownController,
        removal: RemovalController,
        locator: RootPortLocator,
        rescan: RescanController,
        metrics: Optional[MetricsRegistry] = None,
        notify: Optional[Callable[[str], None]] = None,
    ) -> None:
        """Initialize the coordinator.

        Args:
            shutdown: Shutdown controller.
            removal: Removal controller.
            locator: Root-port locator.
            rescan: Rescan controller.
            metrics: Metrics registry, or None to skip metrics.
            notify: Receives short operator-facing messages.
        """
        self._shutdown = shutdown
        self._removal = removal
        self._locator = locator
        self._rescan = rescan
        self._metrics = metrics
        self._notify = notify or (lambda message: None)

    def execute(
        self,
        request: OperationRequest,
        confirm: Optional[ConfirmCallback] = None,
    ) -> HotplugResult:
        """Run a hotplug request.

        Args:
            request: Parsed operator intent.
            confirm: Called before any mutation; False cancels the run.

        Returns:
            Result with completed steps and the first error, if any.
        """
        result = HotplugResult()

        if request.is_empty:
            result.error = InvalidArgumentError("Either --offline or --online is required")
            return result

        if confirm is not None and not confirm(request):
            result.error = OperationCanceledError("Hotplug canceled by operator")
            logger.info("hotplug_canceled")
            return result

        logger.info(
            "hotplug_started",
            operations=[kind.value for kind in request.kinds],
            device_index=request.offline_index,
        )

        kind = OperationKind.OFFLINE
        try:
            if request.offline_index is not None:
                self._run_offline(request.offline_index, result)
                if result.device_absent:
                    self._count(kind, "skipped")
                    return result
                self._count(kind, "success")

            if request.online:
                kind = OperationKind.ONLINE
                self._run_online(result)
                self._count(kind, "success")

        except HotplugError as e:
            result.error = e
            self._count(kind, "failed")
            logger.error(
                "hotplug_failed",
                operation=kind.value,
                error=str(e),
                exit_code=e.exit_code,
                completed_steps=[step.value for step in result.completed_steps],
            )

        return result

    def _run_offline(self, index: int, result: HotplugResult) -> None:
        user = create_device_reference(index, is_management=False)
        management = create_device_reference(index, is_management=True)

        try:
            with self._step(Step.SHUTDOWN_USER, result, device=str(user)):
                polls = self._shutdown.shutdown(user)
        except DeviceNotFoundError as e:
            result.device_absent = True
            logger.info("device_absent", device=str(user), reason=str(e))
            self._notify(DEVICE_ABSENT_MESSAGE)
            return
        except HotplugError as e:
            self._notify(SHUTDOWN_FAILED_MESSAGE)
            raise InvalidArgumentError(f"Device shutdown failed: {e}") from e

        if self._metrics:
            self._metrics.shutdown_polls.observe(polls)

        with self._step(Step.REMOVE_USER, result, device=str(user)):
            self._removal.remove(user)

        try:
            with self._step(Step.REMOVE_MANAGEMENT, result, device=str(management)):
                self._removal.remove(management)
        except HotplugError:
            logger.warning(
                "device_partially_removed",
                device_index=index,
                removed=str(user),
                remaining=str(management),
            )
            raise

        logger.info("device_offline", device_index=index)

    def _run_online(self, result: HotplugResult) -> None:
        with self._step(Step.LOCATE_ROOT_PORT, result):
            root_port = self._locator.find_root_port()

        if self._metrics:
            self._metrics.root_port_candidates_total.inc(self._locator.candidates_scanned)

        with self._step(Step.RESCAN, result, root_port=str(root_port or "")):
            self._rescan.rescan(root_port)

        logger.info("root_port_rescanned", root_port=str(root_port))

    @contextmanager
    def _step(
        self, step: Step, result: HotplugResult, **attributes: Any
    ) -> Generator[None, None, None]:
        """Trace and time one step; mark it completed only if it succeeds."""
        start = time.perf_counter()
        try:
            with trace_span(f"hotplug.{step.value}", attributes):
                yield
        finally:
            if self._metrics:
                self._metrics.step_duration_seconds.labels(step=step.value).observe(
                    time.perf_counter() - start
                )
        result.completed_steps.append(step)

    def _count(self, kind: OperationKind, status: str) -> None:
        if self._metrics:
            self._metrics.operations_total.labels(operation=kind.value, status=status).inc()
