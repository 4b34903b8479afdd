"""Logging setup for lazyfindings.

The browser owns the terminal while it runs, so log records never go to the
screen. Without a log file the package logger only carries a ``NullHandler``;
``configure_logging`` attaches a rotating file handler on request.
"""

from __future__ import annotations

import logging
from logging import handlers
from pathlib import Path

LOGGER_NAME = "lazyfindings"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
MAX_LOG_BYTES = 1_000_000
LOG_BACKUP_COUNT = 3


def configure_logging(log_file: Path | None = None, *, verbose: bool = False) -> logging.Logger:
    """Configure and return the package logger.

    Repeated calls replace previously installed handlers.
    """
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = False
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    if log_file is None:
        logger.addHandler(logging.NullHandler())
        return logger

    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = handlers.RotatingFileHandler(
        log_file,
        maxBytes=MAX_LOG_BYTES,
        backupCount=LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    return logger
