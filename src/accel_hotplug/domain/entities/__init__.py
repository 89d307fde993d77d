"""Domain entities for the hotplug pipeline."""

from accel_hotplug.domain.entities.operation import (
    EXIT_SUCCESS,
    HotplugResult,
    OperationKind,
    OperationRequest,
    Step,
)

__all__ = [
    "EXIT_SUCCESS",
    "HotplugResult",
    "OperationKind",
    "OperationRequest",
    "Step",
]
