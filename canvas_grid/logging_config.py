"""Logging configuration for the canvas-grid CLI.

Provides:
- Configurable log levels (WARNING, INFO, DEBUG)
- Coloured level names on terminals (disabled by NO_COLOR)
- Operation timing logs
"""

import logging
import os
import sys
import time
from contextlib import contextmanager
from typing import Optional, TextIO, Tuple


DEFAULT_FORMAT = "%(levelname)s: %(message)s"
VERBOSE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DEBUG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d: %(message)s"

LOGGER_NAME = "canvas_grid"


class ColoredFormatter(logging.Formatter):
    """Colored log formatter for terminal output."""

    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
    }
    RESET = '\033[0m'

    def format(self, record):
        """Format log record with colors."""
        levelname = record.levelname
        if levelname in self.COLORS:
            record.levelname = f"{self.COLORS[levelname]}{levelname}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = levelname


def log_level(verbose: bool = False, debug: bool = False) -> Tuple[int, str]:
    """Level and format for the CLI flags; --debug wins over --verbose."""
    if debug:
        return logging.DEBUG, DEBUG_FORMAT
    if verbose:
        return logging.INFO, VERBOSE_FORMAT
    return logging.WARNING, DEFAULT_FORMAT


def setup_logging(
    verbose: bool = False,
    debug: bool = False,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """Configure the canvas_grid logger.

    Level names are coloured only when the stream is a terminal and
    NO_COLOR is unset.

    Args:
        verbose: Enable verbose logging (INFO level)
        debug: Enable debug logging (DEBUG level)
        stream: Output stream (default: stderr)

    Returns:
        Configured logger instance
    """
    level, log_format = log_level(verbose, debug)
    stream = stream or sys.stderr

    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.setLevel(level)

    use_color = stream.isatty() and "NO_COLOR" not in os.environ
    handler = logging.StreamHandler(stream)
    handler.setLevel(level)
    handler.setFormatter(ColoredFormatter(log_format) if use_color else logging.Formatter(log_format))
    logger.addHandler(handler)

    return logger


@contextmanager
def log_timing(operation: str, logger: logging.Logger):
    """Context manager for logging operation timing.

    Examples:
        >>> with log_timing("Apply layout", logger):
        ...     session.apply_layout()
        INFO: Apply layout completed in 1.32ms
    """
    start = time.perf_counter()
    logger.debug(f"Starting: {operation}")

    try:
        yield
    finally:
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(f"{operation} completed in {elapsed_ms:.2f}ms")
