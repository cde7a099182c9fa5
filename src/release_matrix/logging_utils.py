"""Logging setup for the command line entrypoint."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

DEFAULT_LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOGGER_NAME = "release_matrix"


def configure_logging(log_file: Path | None = None, level: int = logging.INFO) -> logging.Logger:
    """Route process-wide logging to stderr and, optionally, a log file.

    Library modules never call this; warnings raised while collecting
    artifacts only reach a handler once the caller configures one.
    """

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    formatter = logging.Formatter(fmt=DEFAULT_LOG_FORMAT, datefmt=DEFAULT_DATE_FORMAT)

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    for handler in handlers:
        handler.setFormatter(formatter)
        handler.setLevel(level)
        root_logger.addHandler(handler)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    return logger
