"""Prometheus metrics for accelerator hotplug.

The hotplug command is short-lived, so metrics are not served over HTTP.
They are written once at exit to a node-exporter textfile collector file
when one is configured.
"""

from __future__ import annotations

from pathlib import Path

from prometheus_client import (
    Counter,
    Histogram,
    Info,
    REGISTRY,
    CollectorRegistry,
    write_to_textfile,
)


class MetricsRegistry:
    """Registry of all hotplug metrics."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        """Initialize metrics registry."""
        self._registry = registry or REGISTRY

        self.operations_total = Counter(
            "hotplug_operations_total",
            "Total hotplug operations",
            ["operation", "status"],  # offline/online, success/failed/skipped
            registry=self._registry,
        )

        self.step_duration_seconds = Histogram(
            "hotplug_step_duration_seconds",
            "Duration of individual hotplug steps",
            ["step"],
            buckets=(0.001, 0.01, 0.1, 0.5, 1.0, 5.0, 15.0, 30.0, 60.0),
            registry=self._registry,
        )

        self.shutdown_polls = Histogram(
            "hotplug_shutdown_polls",
            "Poll iterations until the device reported shutdown",
            buckets=(1, 2, 5, 10, 20, 30, 45, 60),
            registry=self._registry,
        )

        self.root_port_candidates_total = Counter(
            "hotplug_root_port_candidates_total",
            "Bridges examined while searching for the root port",
            registry=self._registry,
        )

        self.info = Info(
            "accel_hotplug",
            "Accelerator hotplug information",
            registry=self._registry,
        )

    @property
    def registry(self) -> CollectorRegistry:
        return self._registry

    def write_textfile(self, path: Path) -> None:
        """Write all metrics in the Prometheus text format."""
        write_to_textfile(str(path), self._registry)


_metrics: MetricsRegistry | None = None


def setup_metrics(registry: CollectorRegistry | None = None) -> MetricsRegistry:
    """Set up the global metrics registry."""
    global _metrics
    _metrics = MetricsRegistry(registry)

    from accel_hotplug import __version__
    _metrics.info.info({"version": __version__})

    return _metrics


def get_metrics() -> MetricsRegistry:
    """Get the global metrics registry."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsRegistry()
    return _metrics
