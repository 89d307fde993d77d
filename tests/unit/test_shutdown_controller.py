"""Unit tests for the shutdown controller."""

from __future__ import annotations

import errno

import pytest

from accel_hotplug.adapters.outbound.mock_device import AttributeAccess, MockDeviceResolver
from accel_hotplug.domain.errors import (
    AttributeReadError,
    AttributeWriteError,
    DeviceNotFoundError,
    ShutdownTimeoutError,
)
from accel_hotplug.domain.services.shutdown_controller import POLL_TIMEOUT, ShutdownController
from accel_hotplug.domain.value_objects import FunctionRole, create_device_reference

USER = create_device_reference(0, is_management=False)


@pytest.fixture
def user_state(mock_resolver: MockDeviceResolver):
    return mock_resolver.function(0, FunctionRole.USER)


@pytest.fixture
def controller(mock_resolver: MockDeviceResolver, fake_clock) -> ShutdownController:
    return ShutdownController(mock_resolver, sleep=fake_clock.sleep)


@pytest.mark.unit
class TestShutdownController:
    """Tests for the write-then-poll protocol."""

    def test_completes_on_first_poll(self, controller, mock_resolver, fake_clock, user_state):
        user_state.shutdown_statuses = ["1"]

        polls = controller.shutdown(USER)

        assert polls == 1
        assert fake_clock.sleeps == [1.0]
        assert mock_resolver.log == [
            AttributeAccess("put", "0000:65:00.1", "shutdown", "1"),
            AttributeAccess("get", "0000:65:00.1", "shutdown"),
        ]

    def test_completes_on_third_poll(self, controller, mock_resolver, fake_clock, user_state):
        user_state.shutdown_statuses = ["0", "0", "1"]

        assert controller.shutdown(USER) == 3
        assert len(fake_clock.sleeps) == 3
        assert [a.op for a in mock_resolver.log] == ["put", "get", "get", "get"]

    def test_targets_the_user_function(self, controller, mock_resolver):
        controller.shutdown(USER)
        assert mock_resolver.resolved == [(0, False)]

    def test_missing_attribute_is_not_found(self, controller, mock_resolver, fake_clock, user_state):
        user_state.attributes.discard("shutdown")

        with pytest.raises(DeviceNotFoundError) as exc_info:
            controller.shutdown(USER)

        assert exc_info.value.exit_code == errno.ENOENT
        assert mock_resolver.log == []
        assert fake_clock.sleeps == []

    def test_write_failure(self, controller, mock_resolver, fake_clock, user_state):
        user_state.fail_puts.add("shutdown")

        with pytest.raises(AttributeWriteError) as exc_info:
            controller.shutdown(USER)

        assert exc_info.value.attribute == "shutdown"
        assert exc_info.value.os_errno == errno.EIO
        assert fake_clock.sleeps == []

    def test_read_failure(self, controller, fake_clock, user_state):
        user_state.fail_gets.add("shutdown")

        with pytest.raises(AttributeReadError):
            controller.shutdown(USER)
        assert len(fake_clock.sleeps) == 1

    def test_unparseable_status_is_read_failure(self, controller, user_state):
        user_state.shutdown_statuses = ["busy"]

        with pytest.raises(AttributeReadError) as exc_info:
            controller.shutdown(USER)
        assert exc_info.value.os_errno is None

    def test_other_status_values_keep_polling(self, controller, user_state):
        user_state.shutdown_statuses = ["0", "2", "-1", "1"]
        assert controller.shutdown(USER) == 4

    def test_timeout_after_poll_budget(self, controller, mock_resolver, fake_clock, user_state):
        user_state.shutdown_statuses = ["0"]

        with pytest.raises(ShutdownTimeoutError) as exc_info:
            controller.shutdown(USER)

        assert exc_info.value.exit_code == errno.ETIMEDOUT
        assert len(fake_clock.sleeps) == POLL_TIMEOUT == 60
        reads = [a for a in mock_resolver.log if a.op == "get"]
        assert len(reads) == 60

    def test_injected_budget_and_interval(self, mock_resolver, fake_clock, user_state):
        user_state.shutdown_statuses = ["0"]
        controller = ShutdownController(
            mock_resolver, max_polls=5, poll_interval=0.25, sleep=fake_clock.sleep
        )

        with pytest.raises(ShutdownTimeoutError):
            controller.shutdown(USER)
        assert fake_clock.sleeps == [0.25] * 5

    def test_invalid_budget(self, mock_resolver):
        with pytest.raises(ValueError):
            ShutdownController(mock_resolver, max_polls=0)
