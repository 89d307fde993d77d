"""Inbound adapters - handle incoming requests.

The command-line adapter is the only way in.
"""

from accel_hotplug.adapters.inbound.cli import build_parser, main, run

__all__ = [
    "build_parser",
    "main",
    "run",
]
