"""Logging setup for samplepush.

Per-sample upload results are reported through the log stream on stderr, one
line per decision or response. Records carry the worker thread name so lines
from concurrent uploads can be told apart.
"""

from __future__ import annotations

import logging
import sys
import time
from typing import Any, Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(threadName)s %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Loggers that would otherwise log every request at INFO
NOISY_LOGGERS = ("httpx", "httpcore")


def setup_logging(
    level: int = logging.INFO,
    *,
    quiet: bool = False,
    verbose: bool = False,
) -> None:
    """Configure logging for a samplepush run.

    Args:
        level: Base logging level.
        quiet: Only show errors (failed uploads still appear in the summary).
        verbose: Show debug messages, including HTTP client activity.
    """
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        stream=sys.stderr,
    )
    logging.getLogger("samplepush").setLevel(level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if verbose else logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


class LogContext:
    """Log the start, end and duration of a push run or other operation.

    Example:
        with LogContext("push", logger, workers=4) as ctx:
            ...
            duration = ctx.elapsed
    """

    def __init__(
        self,
        operation: str,
        logger: Optional[logging.Logger] = None,
        **context: Any,
    ):
        self.operation = operation
        self.logger = logger or get_logger(__name__)
        self.context = context
        self._started: Optional[float] = None

    @property
    def elapsed(self) -> float:
        """Seconds since the context was entered."""
        if self._started is None:
            return 0.0
        return time.monotonic() - self._started

    def __enter__(self) -> LogContext:
        self._started = time.monotonic()
        if self.context:
            ctx_str = " ".join(f"{k}={v}" for k, v in self.context.items())
            self.logger.info("Starting %s: %s", self.operation, ctx_str)
        else:
            self.logger.info("Starting %s", self.operation)
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if exc_type:
            self.logger.error("%s failed after %.2fs: %s", self.operation, self.elapsed, exc_val)
        else:
            self.logger.info("%s finished in %.2fs", self.operation, self.elapsed)
