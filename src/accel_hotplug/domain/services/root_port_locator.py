"""Root-port locator: find the bridge above the accelerator.

After hot removal the accelerator no longer has a sysfs entry of its own,
but its upstream bridge ("root port") does, and a ``rescan`` written there
re-enumerates the card. The locator searches the bus devices directory two
levels deep:

    <devices_root>/<bridge>/<function>/{vendor,device}

and returns the first bridge that has a direct child whose vendor and
device identifiers equal the accelerator identity.

The search is best-effort. A child whose identifiers cannot be read is
skipped, as is a bridge whose directory cannot be listed; neither aborts
the search. Directory enumeration order is whatever the filesystem
returns, so with several qualifying bridges any one of them may be
returned.

References:
    - Documentation/PCI/sysfs-pci.rst (kernel tree)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, Optional

from accel_hotplug.domain.value_objects.identifiers import (
    ACCELERATOR_IDENTITY,
    HardwareIdentity,
)

logger = logging.getLogger(__name__)

SYSFS_PCI_DEVICES = Path("/sys/bus/pci/devices")
VENDOR_ATTRIBUTE = "vendor"
DEVICE_ATTRIBUTE = "device"


class RootPortLocator:
    """Two-level search for the accelerator's root port."""

    def __init__(
        self,
        devices_root: Path = SYSFS_PCI_DEVICES,
        identity: HardwareIdentity = ACCELERATOR_IDENTITY,
    ) -> None:
        self._devices_root = Path(devices_root)
        self._identity = identity
        self._candidates_scanned = 0

    @property
    def devices_root(self) -> Path:
        return self._devices_root

    @property
    def candidates_scanned(self) -> int:
        """Number of bridges examined by the most recent search."""
        return self._candidates_scanned

    def find_root_port(self) -> Optional[Path]:
        """Return the bridge directory above the accelerator, or None."""
        self._candidates_scanned = 0

        for bridge in self._list_entries(self._devices_root):
            self._candidates_scanned += 1
            for function_dir in self._list_entries(bridge):
                if not function_dir.is_dir():
                    continue

                identity = self._read_identity(function_dir)
                if identity is None:
                    continue

                if self._identity.matches(*identity):
                    logger.info(f"Found root port {bridge} for {function_dir.name}")
                    return bridge

        logger.info(
            f"No root port with a {self._identity.vendor_id}:{self._identity.device_id} "
            f"child under {self._devices_root}"
        )
        return None

    def _list_entries(self, directory: Path) -> Iterator[Path]:
        """Yield the entries of a directory; an unlistable one yields nothing."""
        try:
            entries = list(directory.iterdir())
        except OSError as e:
            logger.debug(f"Skipping {directory}: {e}")
            return
        yield from entries

    def _read_identity(self, function_dir: Path) -> Optional[tuple[str, str]]:
        """Read (vendor, device) of a function, or None if either is unreadable."""
        try:
            vendor_id = (function_dir / VENDOR_ATTRIBUTE).read_text().strip()
            device_id = (function_dir / DEVICE_ATTRIBUTE).read_text().strip()
        except (OSError, ValueError) as e:
            logger.debug(f"Skipping {function_dir}: {e}")
            return None
        return vendor_id, device_id
