"""Infrastructure layer - cross-cutting concerns."""

from accel_hotplug.infrastructure.config import Config, get_config
from accel_hotplug.infrastructure.container import Container, build_container
from accel_hotplug.infrastructure.logging import get_logger, setup_logging
from accel_hotplug.infrastructure.metrics import MetricsRegistry, get_metrics, setup_metrics
from accel_hotplug.infrastructure.tracing import get_tracer, setup_tracing, trace_span

__all__ = [
    "Config",
    "get_config",
    "Container",
    "build_container",
    "setup_logging",
    "get_logger",
    "setup_metrics",
    "get_metrics",
    "MetricsRegistry",
    "setup_tracing",
    "get_tracer",
    "trace_span",
]
