"""Logging for the ``eo`` package.

Adds a ``TRACE`` level below DEBUG for per-rule sanitizer detail. Every
logger gains a ``trace()`` method once this module is imported. Console
output always goes to stderr; stdout is reserved for the enhanced result.
"""

from __future__ import annotations

import logging
import os
from datetime import datetime

TRACE = 5
TRACE_DIR = "debug"
LOGGER_NAME = "eo"

logging.addLevelName(TRACE, "TRACE")


def _trace(self, message, *args, **kwargs):
    if self.isEnabledFor(TRACE):
        self._log(TRACE, message, args, **kwargs)


logging.Logger.trace = _trace

CONSOLE_FORMAT = "%(levelname)s %(name)s: %(message)s"
TRACE_FILE_FORMAT = (
    "%(asctime)s.%(msecs)03d %(levelname)-5s [%(name)s] "
    "%(funcName)s:%(lineno)d %(message)s"
)
TRACE_FILE_DATEFMT = "%H:%M:%S"


def console_level(debug: bool, trace: bool, verbose: bool) -> int:
    """Pick the stderr threshold from the command-line switches.

    ``--verbose`` only matters together with ``--trace``.
    """
    if trace and verbose:
        return TRACE
    if debug or trace:
        return logging.DEBUG
    return logging.WARNING


def trace_file_handler(directory: str) -> logging.FileHandler:
    """Open a fresh ``trace-<timestamp>.log`` under ``directory``."""
    os.makedirs(directory, exist_ok=True)
    stamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    handler = logging.FileHandler(os.path.join(directory, f"trace-{stamp}.log"))
    handler.setLevel(TRACE)
    handler.setFormatter(logging.Formatter(TRACE_FILE_FORMAT, datefmt=TRACE_FILE_DATEFMT))
    return handler


def setup_logging(
    *, debug: bool, trace: bool, verbose: bool, trace_dir: str | None = None
) -> logging.Logger:
    """Attach handlers to the package logger and return it.

    Calling it again replaces the previous handlers. ``trace_dir`` defaults
    to :data:`TRACE_DIR` in the working directory.
    """
    package_logger = logging.getLogger(LOGGER_NAME)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.setLevel(TRACE)
    package_logger.propagate = False

    stderr = logging.StreamHandler()
    stderr.setLevel(console_level(debug, trace, verbose))
    stderr.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    package_logger.addHandler(stderr)

    if trace:
        package_logger.addHandler(trace_file_handler(trace_dir or TRACE_DIR))

    return package_logger
