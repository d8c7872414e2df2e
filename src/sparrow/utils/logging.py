"""Logging helpers for Sparrow."""

from __future__ import annotations

import logging
from typing import Optional

_LOGGER: Optional[logging.Logger] = None

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(level: int | None = None) -> logging.Logger:
    """Return the package logger, attaching a stream handler on first use.

    Child loggers created with ``logging.getLogger(__name__)`` inside the
    package propagate to this logger, so configuring it once is enough for the
    whole pipeline.
    """

    global _LOGGER
    if _LOGGER is None:
        _LOGGER = logging.getLogger("sparrow")
        if not _LOGGER.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter(LOG_FORMAT))
            _LOGGER.addHandler(handler)
        _LOGGER.setLevel(logging.INFO)
    if level is not None:
        _LOGGER.setLevel(level)
    return _LOGGER


def level_for_verbosity(verbosity: int) -> int:
    """Map a ``-v`` count onto a logging level."""

    return [logging.WARNING, logging.INFO, logging.DEBUG][max(0, min(verbosity, 2))]
