"""Mock device resolver for testing and development.

This adapter provides an in-memory implementation of the DeviceResolver
and DeviceHandle protocols. Every attribute access is appended to a
shared operation log so tests can assert on exact sequences.
"""

from __future__ import annotations

import errno
from dataclasses import dataclass, field
from pathlib import Path
from typing import TypeVar

from accel_hotplug.domain.errors import DeviceNotFoundError, InvalidArgumentError
from accel_hotplug.domain.value_objects.identifiers import FunctionRole, PciAddress
from accel_hotplug.ports.outbound.device_handle import SysfsAttributeError

T = TypeVar("T")

MOCK_SYSFS_ROOT = Path("/mock/sys/bus/pci/devices")


@dataclass(frozen=True)
class AttributeAccess:
    """One recorded attribute access."""

    op: str           # "get" or "put"
    bus_id: str
    attribute: str
    value: str | None = None


@dataclass
class MockFunctionState:
    """State of one mock PCI function.

    Attributes:
        bus_id: PCI address of the function.
        attributes: Names of attributes that exist.
        shutdown_statuses: Values returned by successive reads of
            ``shutdown``; the last value repeats once exhausted.
        fail_puts: Attribute names whose writes fail with EIO.
        fail_gets: Attribute names whose reads fail with EIO.
    """

    bus_id: str
    attributes: set[str] = field(default_factory=lambda: {"shutdown", "remove"})
    shutdown_statuses: list[str] = field(default_factory=lambda: ["1"])
    fail_puts: set[str] = field(default_factory=set)
    fail_gets: set[str] = field(default_factory=set)
    written: dict[str, list[str]] = field(default_factory=dict)
    reads: int = 0


class MockDeviceHandle:
    """DeviceHandle backed by a MockFunctionState."""

    def __init__(self, state: MockFunctionState, log: list[AttributeAccess]) -> None:
        self._state = state
        self._log = log

    @property
    def bus_id(self) -> str:
        return self._state.bus_id

    def path(self, attribute: str = "") -> Path:
        directory = MOCK_SYSFS_ROOT / self._state.bus_id
        return directory / attribute if attribute else directory

    def exists(self, attribute: str) -> bool:
        return attribute in self._state.attributes

    def get(self, attribute: str, kind: type[T]) -> T:
        self._log.append(AttributeAccess("get", self._state.bus_id, attribute))
        if attribute not in self._state.attributes:
            raise SysfsAttributeError(f"No such attribute: {attribute}", attribute, errno.ENOENT)
        if attribute in self._state.fail_gets:
            raise SysfsAttributeError(f"Read failed: {attribute}", attribute, errno.EIO)

        statuses = self._state.shutdown_statuses
        raw = statuses[min(self._state.reads, len(statuses) - 1)]
        self._state.reads += 1
        try:
            return kind(raw)  # type: ignore[call-arg]
        except (TypeError, ValueError) as e:
            raise SysfsAttributeError(f"Unexpected content: {raw!r}", attribute) from e

    def put(self, attribute: str, value: str) -> None:
        self._log.append(AttributeAccess("put", self._state.bus_id, attribute, value))
        if attribute not in self._state.attributes:
            raise SysfsAttributeError(f"No such attribute: {attribute}", attribute, errno.ENOENT)
        if attribute in self._state.fail_puts:
            raise SysfsAttributeError(f"Write failed: {attribute}", attribute, errno.EIO)
        self._state.written.setdefault(attribute, []).append(value)


class MockDeviceResolver:
    """Mock implementation of DeviceResolver for testing.

    Example:
        resolver = MockDeviceResolver()
        card = resolver.add_card("0000:65:00")
        card[FunctionRole.USER].shutdown_statuses = ["0", "0", "1"]
    """

    def __init__(self) -> None:
        self._cards: list[dict[FunctionRole, MockFunctionState]] = []
        self.log: list[AttributeAccess] = []
        self.resolved: list[tuple[int, bool]] = []

    def add_card(self, slot: str) -> dict[FunctionRole, MockFunctionState]:
        """Add a card with a management (.0) and a user (.1) function."""
        card = {
            FunctionRole.MANAGEMENT: MockFunctionState(bus_id=f"{slot}.0"),
            FunctionRole.USER: MockFunctionState(bus_id=f"{slot}.1"),
        }
        self._cards.append(card)
        return card

    def index_for(self, identifier: str) -> int:
        if identifier.isdigit():
            index = int(identifier)
            if index >= len(self._cards):
                raise DeviceNotFoundError(f"Device index {index} out of range")
            return index
        try:
            slot = PciAddress.parse(identifier).slot
        except ValueError as e:
            raise InvalidArgumentError(str(e)) from e
        for index, card in enumerate(self._cards):
            if card[FunctionRole.MANAGEMENT].bus_id.startswith(slot):
                return index
        raise DeviceNotFoundError(f"No accelerator found at {identifier}")

    def resolve(self, index: int, is_management: bool) -> MockDeviceHandle:
        self.resolved.append((index, is_management))
        if not 0 <= index < len(self._cards):
            raise DeviceNotFoundError(f"Device index {index} out of range")
        role = FunctionRole.MANAGEMENT if is_management else FunctionRole.USER
        return MockDeviceHandle(self._cards[index][role], self.log)

    # Test helpers
    def function(self, index: int, role: FunctionRole) -> MockFunctionState:
        """Return the state of one function of a card."""
        return self._cards[index][role]

    def puts(self) -> list[AttributeAccess]:
        """Return only the recorded writes."""
        return [access for access in self.log if access.op == "put"]

    def clear(self) -> None:
        """Clear all cards and the operation log."""
        self._cards.clear()
        self.log.clear()
        self.resolved.clear()
