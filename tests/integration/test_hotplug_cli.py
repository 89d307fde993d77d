"""Integration tests for the accel-hotplug command against a fake sysfs tree."""

from __future__ import annotations

import errno

import pytest

from accel_hotplug.adapters.inbound.cli import CAUTION_MESSAGE, PROCEED_PROMPT, main
from accel_hotplug.adapters.outbound.sysfs_device import SysfsDeviceResolver
from accel_hotplug.application.coordinator import DEVICE_ABSENT_MESSAGE
from accel_hotplug.domain.services import ShutdownController
from accel_hotplug.infrastructure.config import MetricsConfig
from accel_hotplug.ports.outbound.device_handle import DeviceResolver

pytestmark = pytest.mark.integration


@pytest.fixture
def card(fake_sysfs):
    """One accelerator card at 0000:65:00 below root port 0000:64:00.0."""
    fake_sysfs.add_bridge("0000:64:00.0")
    fake_sysfs.add_function("0000:65:00.0", parent="0000:64:00.0")
    management = fake_sysfs.add_function("0000:65:00.0")
    user = fake_sysfs.add_function("0000:65:00.1")
    return management, user


@pytest.fixture
def fast_container(container, test_config, fake_clock):
    """Container whose shutdown controller does not really sleep."""
    resolver = SysfsDeviceResolver(test_config.sysfs.devices_root)
    container.register_singleton(DeviceResolver, resolver)
    container.register_singleton(
        ShutdownController, ShutdownController(resolver, sleep=fake_clock.sleep)
    )
    return container


def refuse_prompt(prompt):
    raise AssertionError("prompted although --force was given")


class TestOffline:
    """Tests for --offline."""

    def test_shutdown_and_remove(self, as_root, card, test_config, fast_container, capsys):
        management, user = card

        code = main(
            ["--offline", "0000:65:00.0", "--force"],
            config=test_config,
            container=fast_container,
            input_fn=refuse_prompt,
        )

        assert code == 0
        assert (user / "shutdown").read_text() == "1"
        assert (user / "remove").read_text() == "1"
        assert (management / "remove").read_text() == "1"
        assert (management / "shutdown").read_text() == "0\n"
        assert CAUTION_MESSAGE in capsys.readouterr().out

    def test_offline_by_index(self, as_root, card, test_config, fast_container):
        _, user = card

        assert main(["--offline", "0", "-y"], config=test_config, container=fast_container) == 0
        assert (user / "remove").read_text() == "1"

    def test_device_absent_is_success(self, as_root, fake_sysfs, test_config, container, capsys):
        management = fake_sysfs.add_function("0000:65:00.0")
        user = fake_sysfs.add_function("0000:65:00.1", attributes=("remove",))

        code = main(["--offline", "0000:65:00.0", "--force"], config=test_config, container=container)

        assert code == 0
        assert (user / "remove").read_text() == "0\n"
        assert (management / "remove").read_text() == "0\n"
        assert DEVICE_ABSENT_MESSAGE in capsys.readouterr().out

    def test_unknown_device(self, as_root, card, test_config, container):
        code = main(["--offline", "0000:17:00.0", "--force"], config=test_config, container=container)
        assert code == errno.ENOENT

    def test_index_out_of_range(self, as_root, card, test_config, container):
        assert main(["--offline", "4", "--force"], config=test_config, container=container) == errno.ENOENT

    def test_malformed_bdf(self, as_root, card, test_config, container, capsys):
        code = main(["--offline", "slot-65", "--force"], config=test_config, container=container)

        assert code == errno.EINVAL
        assert "ERROR:" in capsys.readouterr().err


class TestOnline:
    """Tests for --online."""

    def test_rescan_root_port(self, as_root, card, fake_sysfs, test_config, container):
        code = main(["--online", "--force"], config=test_config, container=container)

        assert code == 0
        assert (fake_sysfs.devices / "0000:64:00.0" / "rescan").read_text() == "1"

    def test_no_root_port(self, as_root, fake_sysfs, test_config, container):
        bridge = fake_sysfs.add_bridge("0000:00:01.0")

        code = main(["--online", "--force"], config=test_config, container=container)

        assert code == errno.ENOENT
        assert (bridge / "rescan").read_text() == "0\n"

    def test_offline_then_online(self, as_root, card, fake_sysfs, test_config, fast_container):
        _, user = card

        code = main(
            ["--offline", "0", "--online", "--force"],
            config=test_config,
            container=fast_container,
        )

        assert code == 0
        assert (user / "remove").read_text() == "1"
        assert (fake_sysfs.devices / "0000:64:00.0" / "rescan").read_text() == "1"


class TestGuards:
    """Tests for argument, privilege and confirmation checks."""

    def test_no_switches(self, test_config, container, capsys):
        assert main([], config=test_config, container=container) == errno.EINVAL
        assert "ERROR" in capsys.readouterr().err

    def test_unknown_option(self, test_config, container):
        assert main(["--reboot"], config=test_config, container=container) == errno.EINVAL

    def test_help(self, test_config, container, capsys):
        assert main(["--help"], config=test_config, container=container) == 0
        assert "--offline" in capsys.readouterr().out

    def test_requires_root(self, monkeypatch, card, test_config, container, capsys):
        _, user = card
        monkeypatch.setattr("accel_hotplug.adapters.inbound.cli.os.geteuid", lambda: 1000)

        code = main(["--offline", "0", "--force"], config=test_config, container=container)

        assert code == errno.EPERM
        assert (user / "shutdown").read_text() == "0\n"
        assert "root privileges required" in capsys.readouterr().err

    def test_declined(self, as_root, card, test_config, container):
        _, user = card
        prompts = []

        def answer(prompt):
            prompts.append(prompt)
            return "n"

        code = main(["--offline", "0"], config=test_config, container=container, input_fn=answer)

        assert code == errno.ECANCELED
        assert prompts == [PROCEED_PROMPT]
        assert (user / "shutdown").read_text() == "0\n"

    def test_reprompts_until_answer(self, as_root, card, fake_sysfs, test_config, container):
        answers = iter(["", "maybe", "y"])

        code = main(["--online"], config=test_config, container=container, input_fn=lambda p: next(answers))

        assert code == 0
        assert (fake_sysfs.devices / "0000:64:00.0" / "rescan").read_text() == "1"

    def test_end_of_input_declines(self, as_root, card, fake_sysfs, test_config, container):
        def eof(prompt):
            raise EOFError

        code = main(["--online"], config=test_config, container=container, input_fn=eof)

        assert code == errno.ECANCELED
        assert (fake_sysfs.devices / "0000:64:00.0" / "rescan").read_text() == "0\n"


class TestMetricsExport:
    """Tests for the textfile metrics export."""

    def test_writes_textfile(self, as_root, card, test_config, container, temp_dir):
        target = temp_dir / "accel_hotplug.prom"
        config = test_config.model_copy(update={"metrics": MetricsConfig(textfile_path=target)})

        main(["--online", "--force"], config=config, container=container)

        text = target.read_text()
        assert 'hotplug_operations_total{operation="online",status="success"} 1.0' in text
        assert "accel_hotplug_info" in text

    def test_written_on_failure(self, as_root, fake_sysfs, test_config, container, temp_dir):
        target = temp_dir / "accel_hotplug.prom"
        config = test_config.model_copy(update={"metrics": MetricsConfig(textfile_path=target)})

        assert main(["--online", "--force"], config=config, container=container) == errno.ENOENT
        assert 'status="failed"' in target.read_text()

    def test_unwritable_target_does_not_change_exit(self, as_root, card, test_config, container, temp_dir):
        target = temp_dir / "missing" / "accel_hotplug.prom"
        config = test_config.model_copy(update={"metrics": MetricsConfig(textfile_path=target)})

        assert main(["--online", "--force"], config=config, container=container) == 0
