"""Pytest configuration and fixtures for accel_hotplug tests."""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Generator, Iterable

import pytest
from prometheus_client import CollectorRegistry

from accel_hotplug.adapters.outbound.mock_device import MockDeviceResolver
from accel_hotplug.infrastructure.config import Config, SysfsConfig
from accel_hotplug.infrastructure.container import Container
from accel_hotplug.infrastructure.metrics import MetricsRegistry


class FakeSysfs:
    """Builds a /sys/bus/pci/devices look-alike under a temp directory.

    Top-level entries stand for bridges (root ports) and endpoints; a
    function created with ``parent`` is nested one level below a bridge,
    the way a downstream device appears inside its root port's directory.
    """

    def __init__(self, root: Path) -> None:
        self.devices = root / "sys" / "bus" / "pci" / "devices"
        self.devices.mkdir(parents=True)

    def add_function(
        self,
        bus_id: str,
        vendor: str = "0x10ee",
        device: str = "0x9134",
        parent: str | None = None,
        attributes: Iterable[str] = ("shutdown", "remove"),
    ) -> Path:
        directory = self.devices / parent / bus_id if parent else self.devices / bus_id
        directory.mkdir(parents=True)
        (directory / "vendor").write_text(f"{vendor}\n")
        (directory / "device").write_text(f"{device}\n")
        for attribute in attributes:
            (directory / attribute).write_text("0\n")
        return directory

    def add_bridge(self, bus_id: str, vendor: str = "0x8086", device: str = "0x2030") -> Path:
        return self.add_function(bus_id, vendor, device, attributes=("rescan",))


class FakeClock:
    """Records sleeps instead of sleeping."""

    def __init__(self) -> None:
        self.sleeps: list[float] = []

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def fake_sysfs(temp_dir: Path) -> FakeSysfs:
    """Provide an empty fake sysfs PCI devices tree."""
    return FakeSysfs(temp_dir)


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def mock_resolver() -> MockDeviceResolver:
    """Provide a mock resolver with one card at 0000:65:00."""
    resolver = MockDeviceResolver()
    resolver.add_card("0000:65:00")
    return resolver


@pytest.fixture
def test_config(fake_sysfs: FakeSysfs) -> Config:
    """Provide a configuration pointing at the fake sysfs tree."""
    return Config(sysfs=SysfsConfig(devices_root=fake_sysfs.devices))


@pytest.fixture
def container() -> Generator[Container, None, None]:
    """Provide a fresh DI container for each test."""
    c = Container()
    yield c
    c.clear()


@pytest.fixture
def metrics_registry() -> MetricsRegistry:
    """Provide a fresh metrics registry for each test."""
    registry = CollectorRegistry(auto_describe=True)
    return MetricsRegistry(registry=registry)


@pytest.fixture
def as_root(monkeypatch: pytest.MonkeyPatch) -> None:
    """Pretend the test runs with effective uid 0."""
    monkeypatch.setattr("accel_hotplug.adapters.inbound.cli.os.geteuid", lambda: 0)


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests")
