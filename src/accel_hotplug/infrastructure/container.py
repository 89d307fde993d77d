"""Dependency injection container."""

from __future__ import annotations

from typing import Any, Callable, TypeVar

from accel_hotplug.infrastructure.config import Config

T = TypeVar("T")


class Container:
    """
    Simple dependency injection container.

    Supports singleton and factory registrations with lazy initialization.
    """

    def __init__(self) -> None:
        """Initialize the container."""
        self._singletons: dict[type, Any] = {}
        self._factories: dict[type, Callable[[Container], Any]] = {}
        self._instances: dict[type, Any] = {}

    def register_singleton(self, interface: type[T], instance: T) -> None:
        """
        Register a singleton instance.

        Args:
            interface: The interface/type to register
            instance: The singleton instance
        """
        self._singletons[interface] = instance
        self._instances[interface] = instance

    def register_factory(
        self,
        interface: type[T],
        factory: Callable[[Container], T],
    ) -> None:
        """
        Register a factory function for lazy instantiation.

        Args:
            interface: The interface/type to register
            factory: Factory function that takes the container and returns an instance
        """
        self._factories[interface] = factory

    def resolve(self, interface: type[T]) -> T:
        """
        Resolve a dependency.

        Raises:
            KeyError: If no registration exists for the interface
        """
        if interface in self._instances:
            return self._instances[interface]

        if interface in self._factories:
            instance = self._factories[interface](self)
            self._instances[interface] = instance
            return instance

        raise KeyError(f"No registration found for {interface}")

    def has(self, interface: type) -> bool:
        """Check if an interface is registered."""
        return (
            interface in self._singletons
            or interface in self._factories
            or interface in self._instances
        )

    def clear(self) -> None:
        """Clear all registrations and instances."""
        self._singletons.clear()
        self._factories.clear()
        self._instances.clear()


def build_container(
    config: Config,
    notify: Callable[[str], None] | None = None,
    container: Container | None = None,
) -> Container:
    """
    Register the hotplug object graph.

    Already registered interfaces are kept, so callers (and tests) can
    pre-register a resolver or a metrics registry before wiring the rest.

    Args:
        config: Configuration to wire from
        notify: Operator message sink passed to the coordinator
        container: Container to populate (a new one by default)

    Returns:
        The populated container
    """
    from accel_hotplug.adapters.outbound.sysfs_device import SysfsDeviceResolver
    from accel_hotplug.application.coordinator import HotplugCoordinator
    from accel_hotplug.domain.services import (
        RemovalController,
        RescanController,
        RootPortLocator,
        ShutdownController,
    )
    from accel_hotplug.infrastructure.metrics import MetricsRegistry, get_metrics
    from accel_hotplug.ports.outbound.device_handle import DeviceResolver

    c = container or Container()

    def register(interface: type[T], factory: Callable[[Container], T]) -> None:
        if not c.has(interface):
            c.register_factory(interface, factory)

    register(Config, lambda _: config)
    register(MetricsRegistry, lambda _: get_metrics())
    register(
        DeviceResolver,
        lambda k: SysfsDeviceResolver(
            devices_root=k.resolve(Config).sysfs.devices_root,
            management_function=k.resolve(Config).device.management_function,
            user_function=k.resolve(Config).device.user_function,
        ),
    )
    register(ShutdownController, lambda k: ShutdownController(k.resolve(DeviceResolver)))
    register(RemovalController, lambda k: RemovalController(k.resolve(DeviceResolver)))
    register(
        RootPortLocator,
        lambda k: RootPortLocator(devices_root=k.resolve(Config).sysfs.devices_root),
    )
    register(RescanController, lambda _: RescanController())
    register(
        HotplugCoordinator,
        lambda k: HotplugCoordinator(
            shutdown=k.resolve(ShutdownController),
            removal=k.resolve(RemovalController),
            locator=k.resolve(RootPortLocator),
            rescan=k.resolve(RescanController),
            metrics=k.resolve(MetricsRegistry),
            notify=notify,
        ),
    )
    return c
