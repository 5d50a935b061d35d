"""Logging setup shared by the command line entry points."""

from __future__ import annotations

import logging
import sys
from typing import TextIO

LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    level: int = logging.INFO,
    module_name: str = "src",
    stream: TextIO | None = None,
) -> logging.Logger:
    """Attach a single console handler to the package logger.

    CLI results are printed to stdout as JSON, so log lines go to stderr
    unless another ``stream`` is given. Repeated calls only change the level.

    Args:
        level: Logging level (default INFO).
        module_name: Logger to configure; ``src`` covers every module logger.
        stream: Output stream for the handler (default: stderr).

    Returns:
        The configured logger.
    """
    logger = logging.getLogger(module_name)
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)

    for handler in logger.handlers:
        handler.setLevel(level)
    return logger
