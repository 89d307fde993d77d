"""Rescan controller: re-enumerate the bus below a root port.

The stream is opened unbuffered so a failed write surfaces on the write
call itself and closing the file cannot raise a second, deferred error.
"""

from __future__ import annotations

import errno
import logging
from pathlib import Path
from typing import Optional

from accel_hotplug.domain.errors import (
    AttributeOpenError,
    AttributeWriteError,
    RootPortNotFoundError,
)

logger = logging.getLogger(__name__)

RESCAN_ATTRIBUTE = "rescan"
RESCAN_REQUEST = b"1"


def _os_errno(error: OSError) -> int:
    return error.errno if error.errno else errno.EIO


class RescanController:
    """Write "1" to ``<root_port>/rescan``."""

    def rescan(self, root_port: Optional[Path]) -> None:
        """Trigger a rescan below a root port.

        Args:
            root_port: Bridge directory from the locator, or None if the
                locator found nothing.

        Raises:
            RootPortNotFoundError: ``root_port`` is None or empty; nothing
                is opened.
            AttributeOpenError: The attribute could not be opened; the exit
                code is the OS errno.
            AttributeWriteError: Writing or flushing failed; the exit code
                is the OS errno.
        """
        if root_port is None or str(root_port) in ("", "."):
            raise RootPortNotFoundError("No root port found for the accelerator")

        rescan_path = Path(root_port) / RESCAN_ATTRIBUTE

        try:
            stream = open(rescan_path, "wb", buffering=0)
        except OSError as e:
            code = _os_errno(e)
            raise AttributeOpenError(
                f"Failed to open {rescan_path}: {e.strerror or e}",
                attribute=RESCAN_ATTRIBUTE,
                os_errno=code,
                exit_code=code,
            ) from e

        with stream:
            try:
                stream.write(RESCAN_REQUEST)
                stream.flush()
            except OSError as e:
                code = _os_errno(e)
                raise AttributeWriteError(
                    f"Failed to write {rescan_path}: {e.strerror or e}",
                    attribute=RESCAN_ATTRIBUTE,
                    os_errno=code,
                    exit_code=code,
                ) from e

        logger.info(f"Rescan triggered at {rescan_path}")
