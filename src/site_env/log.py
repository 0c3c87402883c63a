"""Logging setup for programs embedding site-env."""

from __future__ import annotations

import logging
import os
import sys

_LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"
_VALID_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def configure_logging(level: int | str | None = None) -> None:
    """Send ``site_env`` log records to stderr at *level*.

    *level* defaults to the ``SITE_ENV_LOG`` env var. With neither set the
    embedding program's logging setup is left alone.
    """
    if level is None:
        level = os.environ.get("SITE_ENV_LOG") or None
    if level is None:
        return
    if isinstance(level, str):
        name = level.upper()
        if name not in _VALID_LEVELS:
            expected = ", ".join(_VALID_LEVELS)
            raise ValueError(f"Invalid log level {level!r}, expected one of {expected}")
        level = logging.getLevelName(name)

    logger = logging.getLogger("site_env")
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        logger.addHandler(handler)
    logger.setLevel(level)
