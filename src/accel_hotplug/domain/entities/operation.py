"""Hotplug operation request and result entities.

A request names what the operator asked for; a result records how far the
pipeline got and what status the process should exit with.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from accel_hotplug.domain.errors import HotplugError


EXIT_SUCCESS = 0


class OperationKind(Enum):
    """Top-level paths of the hotplug pipeline."""
    OFFLINE = "offline"   # shutdown + remove
    ONLINE = "online"     # locate root port + rescan


class Step(Enum):
    """Individual pipeline steps, in the order they can run."""
    SHUTDOWN_USER = "shutdown_user"
    REMOVE_USER = "remove_user"
    REMOVE_MANAGEMENT = "remove_management"
    LOCATE_ROOT_PORT = "locate_root_port"
    RESCAN = "rescan"


@dataclass(frozen=True)
class OperationRequest:
    """Parsed operator intent.

    Attributes:
        offline_index: Resolved device index to take offline, or None.
        online: Whether to rescan the accelerator's root port.
    """
    offline_index: Optional[int] = None
    online: bool = False

    @property
    def is_empty(self) -> bool:
        return self.offline_index is None and not self.online

    @property
    def kinds(self) -> list[OperationKind]:
        kinds = []
        if self.offline_index is not None:
            kinds.append(OperationKind.OFFLINE)
        if self.online:
            kinds.append(OperationKind.ONLINE)
        return kinds


@dataclass
class HotplugResult:
    """Outcome of one coordinator run."""
    completed_steps: list[Step] = field(default_factory=list)
    error: Optional[HotplugError] = None
    device_absent: bool = False   # shutdown attribute missing, treated as done

    @property
    def success(self) -> bool:
        return self.error is None

    @property
    def exit_code(self) -> int:
        if self.error is None:
            return EXIT_SUCCESS
        return self.error.exit_code
