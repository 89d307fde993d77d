"""sysfs implementation of the device resolver and handle ports.

Accelerator cards expose two physical functions in the same slot: the
management function and the user function. Cards are numbered by sorting
the slots where both functions carry the accelerator vendor id; a card's
index is its position in that list.

Layout read and written by this adapter:

    <devices_root>/<dddd:bb:dd.f>/vendor     hex vendor id, e.g. "0x10ee"
    <devices_root>/<dddd:bb:dd.f>/shutdown   write 1, read back 0/1
    <devices_root>/<dddd:bb:dd.f>/remove     write 1

References:
    - Documentation/ABI/testing/sysfs-bus-pci (kernel tree)
"""

from __future__ import annotations

from pathlib import Path
from typing import TypeVar

from accel_hotplug.domain.errors import DeviceNotFoundError, InvalidArgumentError
from accel_hotplug.domain.value_objects.identifiers import (
    XILINX_VENDOR_ID,
    PCIeBusId,
    PCIeSlotId,
    PciAddress,
)
from accel_hotplug.infrastructure.logging import get_logger
from accel_hotplug.ports.outbound.device_handle import SysfsAttributeError

T = TypeVar("T")

logger = get_logger(__name__)


class SysfsDeviceHandle:
    """Attribute access below one function's sysfs directory."""

    def __init__(self, directory: Path, bus_id: PCIeBusId) -> None:
        self._directory = directory
        self._bus_id = bus_id

    @property
    def bus_id(self) -> str:
        return self._bus_id

    def path(self, attribute: str = "") -> Path:
        return self._directory / attribute if attribute else self._directory

    def exists(self, attribute: str) -> bool:
        return self.path(attribute).exists()

    def get(self, attribute: str, kind: type[T]) -> T:
        """Read an attribute, strip whitespace and convert with ``kind``.

        Raises:
            SysfsAttributeError: On I/O failure or unconvertible content.
        """
        attr_path = self.path(attribute)
        try:
            text = attr_path.read_text().strip()
        except OSError as e:
            raise SysfsAttributeError(
                f"Failed to read {attr_path}: {e.strerror or e}", attribute, e.errno
            ) from e

        try:
            return kind(text)  # type: ignore[call-arg]
        except (TypeError, ValueError) as e:
            raise SysfsAttributeError(
                f"Unexpected content in {attr_path}: {text!r}", attribute
            ) from e

    def put(self, attribute: str, value: str) -> None:
        """Write a value to an attribute through an unbuffered stream.

        Raises:
            SysfsAttributeError: If opening or writing fails.
        """
        attr_path = self.path(attribute)
        try:
            with open(attr_path, "wb", buffering=0) as f:
                f.write(value.encode())
        except OSError as e:
            raise SysfsAttributeError(
                f"Failed to write {attr_path}: {e.strerror or e}", attribute, e.errno
            ) from e
        logger.debug("attribute_written", path=str(attr_path), value=value)

    def __repr__(self) -> str:
        return f"SysfsDeviceHandle({self._directory})"


class SysfsDeviceResolver:
    """Resolve accelerator indices and BDF strings against sysfs.

    Attributes:
        devices_root: Directory listing every PCI function on the host.
    """

    def __init__(
        self,
        devices_root: Path = Path("/sys/bus/pci/devices"),
        vendor_id: str = XILINX_VENDOR_ID,
        management_function: int = 0,
        user_function: int = 1,
    ) -> None:
        self.devices_root = Path(devices_root)
        self._vendor_id = vendor_id
        self._management_function = management_function
        self._user_function = user_function

    def slots(self) -> list[PCIeSlotId]:
        """Return the sorted slots that expose both accelerator functions.

        A slot with only one vendor function (a lone bridge or an unrelated
        device of the same vendor) is not a card and does not take an index.
        """
        try:
            entries = list(self.devices_root.iterdir())
        except OSError as e:
            logger.warning("devices_root_unlistable", path=str(self.devices_root), error=str(e))
            return []

        functions: dict[PCIeSlotId, set[int]] = {}
        for entry in entries:
            try:
                address = PciAddress.parse(entry.name)
            except ValueError:
                continue
            try:
                vendor = (entry / "vendor").read_text().strip()
            except OSError:
                continue
            if vendor == self._vendor_id and address.function is not None:
                functions.setdefault(address.slot, set()).add(address.function)

        required = {self._management_function, self._user_function}
        return sorted(slot for slot, present in functions.items() if required <= present)

    def index_for(self, identifier: str) -> int:
        """Map a decimal index or a ``[dddd:]bb:dd.f`` address to a card index.

        Raises:
            InvalidArgumentError: The identifier is neither form.
            DeviceNotFoundError: No accelerator card matches.
        """
        identifier = identifier.strip()
        slots = self.slots()

        if identifier.isascii() and identifier.isdigit():
            index = int(identifier)
            if index >= len(slots):
                raise DeviceNotFoundError(
                    f"Device index {index} out of range ({len(slots)} card(s) found)"
                )
            return index

        try:
            address = PciAddress.parse(identifier)
        except ValueError as e:
            raise InvalidArgumentError(str(e)) from e

        try:
            return slots.index(address.slot)
        except ValueError:
            raise DeviceNotFoundError(f"No accelerator found at {identifier}") from None

    def resolve(self, index: int, is_management: bool) -> SysfsDeviceHandle:
        """Return a handle for one function of card ``index``.

        Raises:
            DeviceNotFoundError: The index is out of range.
        """
        slots = self.slots()
        if not 0 <= index < len(slots):
            raise DeviceNotFoundError(f"Device index {index} out of range")

        function = self._management_function if is_management else self._user_function
        bus_id = PciAddress.parse(slots[index]).with_function(function)
        return SysfsDeviceHandle(self.devices_root / bus_id, bus_id)
