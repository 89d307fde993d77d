"""Allow ``python -m accel_hotplug``."""

from accel_hotplug.adapters.inbound.cli import run

if __name__ == "__main__":
    run()
