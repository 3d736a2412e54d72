"""Logging and performance tracing for the grid engine.

Run through the gridscope-debug entry point to send output to the console.
The DEBUG_PERF flag controls whether performance timing is logged. Timings
go out at DEBUG; anything slower than SLOW_OPERATION_MS is raised to INFO so
a lagging search or scroll shows up without full debug output.

Usage:
    from ..utils.debug_trace import logger, perf_timer

    logger.debug("Starting operation")

    with perf_timer("visible_rows", row_count=1000):
        derive_rows()
"""

from __future__ import annotations

import logging
import sys
import time
from collections.abc import Callable
from contextlib import contextmanager
from functools import wraps
from typing import Any, TextIO

# Global flag to enable/disable performance tracing
DEBUG_PERF = True

# Elapsed time above which a timing is logged at INFO instead of DEBUG
SLOW_OPERATION_MS = 100.0

LOG_FORMAT = "%(asctime)s.%(msecs)03d [%(levelname)s] %(name)s: %(message)s"

# Package logger; child modules log through it
logger = logging.getLogger("gridscope")


def setup_debug_logging(level: int = logging.DEBUG, stream: TextIO | None = None) -> None:
    """Attach a console handler to the package logger. Safe to call more than once.

    Args:
        level: Level for both the logger and the handler.
        stream: Output stream (defaults to stdout).
    """
    if logger.handlers:
        return

    logger.setLevel(level)
    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S"))
    logger.addHandler(handler)


def _log_elapsed(operation: str, start: float, row_count: int | None = None) -> None:
    elapsed_ms = (time.perf_counter() - start) * 1000
    level = logging.INFO if elapsed_ms > SLOW_OPERATION_MS else logging.DEBUG
    rows = f" ({row_count} rows)" if row_count is not None else ""
    logger.log(level, f"PERF: {operation}{rows} took {elapsed_ms:.2f}ms")


@contextmanager
def perf_timer(operation: str, row_count: int | None = None):
    """Context manager for timing operations.

    Args:
        operation: Name of the operation being timed
        row_count: Optional row count for context
    """
    if not DEBUG_PERF:
        yield
        return

    start = time.perf_counter()
    try:
        yield
    finally:
        _log_elapsed(operation, start, row_count)


def log_perf(func: Callable) -> Callable:
    """Decorator to log function performance."""

    @wraps(func)
    def wrapper(*args, **kwargs) -> Any:
        if not DEBUG_PERF:
            return func(*args, **kwargs)

        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            _log_elapsed(func.__qualname__, start)

    return wrapper
