"""Command-line adapter for accelerator hotplug.

Usage:
    accel-hotplug --offline <bdf|index>   shut down and remove the card
    accel-hotplug --online                rescan the card's root port

Both switches may be given; offline runs first. The command must run as
root and asks for confirmation before touching sysfs unless ``--force``
is given. The exit status is 0 on success or a positive errno value.
"""

from __future__ import annotations

import argparse
import errno
import os
import sys
from typing import Callable, Optional, Sequence

from prometheus_client import CollectorRegistry

from accel_hotplug.application.coordinator import HotplugCoordinator
from accel_hotplug.domain.entities.operation import EXIT_SUCCESS, OperationRequest
from accel_hotplug.domain.errors import HotplugError, PermissionDeniedError
from accel_hotplug.infrastructure.config import Config, get_config
from accel_hotplug.infrastructure.container import Container, build_container
from accel_hotplug.infrastructure.logging import get_logger, setup_logging
from accel_hotplug.infrastructure.metrics import MetricsRegistry, setup_metrics
from accel_hotplug.infrastructure.tracing import setup_tracing, shutdown_tracing
from accel_hotplug.ports.outbound.device_handle import DeviceResolver

logger = get_logger(__name__)

DESCRIPTION = "Perform managed hotplug on the xilinx device"
CAUTION_MESSAGE = (
    "CAUTION: Performing hotplug command. "
    "This command is going to impact both user pf and mgmt pf.\n"
    "Please make sure no application is currently running."
)
PROCEED_PROMPT = "Are you sure you wish to proceed? [y/n]: "


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="accel-hotplug",
        description=DESCRIPTION,
        allow_abbrev=False,
    )
    parser.add_argument(
        "--offline",
        help="Shut down and remove the card (BDF such as 0000:65:00.0, or index)",
        metavar="BDF",
    )
    parser.add_argument(
        "--online",
        action="store_true",
        help="Rescan the card's root port to bring it back",
    )
    parser.add_argument(
        "-y",
        "--force",
        action="store_true",
        help="Do not ask for confirmation",
    )
    parser.add_argument(
        "-d",
        "--debug",
        action="count",
        default=0,
        help="Increase debugging verbosity",
    )
    return parser


def require_root() -> None:
    """Raise PermissionDeniedError unless running with effective uid 0."""
    if os.geteuid() != 0:
        raise PermissionDeniedError("root privileges required.")


def can_proceed(input_fn: Callable[[str], str] = input) -> bool:
    """Ask until the operator answers y or n; end of input means no."""
    while True:
        try:
            answer = input_fn(PROCEED_PROMPT).strip()
        except EOFError:
            return False
        if answer in ("y", "n"):
            return answer == "y"


def make_confirm(
    force: bool, input_fn: Callable[[str], str] = input
) -> Callable[[OperationRequest], bool]:
    def confirm(request: OperationRequest) -> bool:
        print(CAUTION_MESSAGE, flush=True)
        return force or can_proceed(input_fn)

    return confirm


def main(
    argv: Optional[Sequence[str]] = None,
    config: Optional[Config] = None,
    container: Optional[Container] = None,
    input_fn: Callable[[str], str] = input,
) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        return EXIT_SUCCESS if not e.code else errno.EINVAL

    config = config or get_config()
    level = "DEBUG" if args.debug > 0 else config.observability.log_level
    setup_logging(level=level, log_format=config.observability.log_format)

    if args.offline is None and not args.online:
        parser.print_usage(sys.stderr)
        print("ERROR: one of --offline or --online is required", file=sys.stderr)
        return errno.EINVAL

    if config.observability.otel_endpoint:
        setup_tracing(
            service_name=config.observability.otel_service_name,
            otlp_endpoint=config.observability.otel_endpoint,
        )

    container = container or Container()
    if not container.has(MetricsRegistry):
        container.register_singleton(MetricsRegistry, setup_metrics(CollectorRegistry()))
    build_container(config, notify=print, container=container)

    try:
        require_root()

        offline_index = None
        if args.offline is not None:
            offline_index = container.resolve(DeviceResolver).index_for(args.offline)

        request = OperationRequest(offline_index=offline_index, online=args.online)
        coordinator = container.resolve(HotplugCoordinator)
        result = coordinator.execute(request, confirm=make_confirm(args.force, input_fn))
        error = result.error
    except HotplugError as e:
        error = e
    finally:
        _export_metrics(config, container.resolve(MetricsRegistry))
        shutdown_tracing()

    if error is not None:
        print(f"ERROR: {error}", file=sys.stderr)
        return error.exit_code
    return EXIT_SUCCESS


def _export_metrics(config: Config, metrics: MetricsRegistry) -> None:
    path = config.metrics.textfile_path
    if path is None:
        return
    try:
        metrics.write_textfile(path)
    except OSError as e:
        logger.warning("metrics_export_failed", path=str(path), error=str(e))


def run() -> None:
    """Console script entry point."""
    sys.exit(main())
