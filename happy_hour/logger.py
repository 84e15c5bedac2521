"""Logging for the happy hour search pipeline."""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional, TextIO

_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"


def level_from_env() -> int:
    """DEBUG_HAPPY_HOUR=true wins; otherwise HAPPY_HOUR_LOG_LEVEL by name, default INFO."""
    if os.getenv("DEBUG_HAPPY_HOUR", "false").strip().lower() == "true":
        return logging.DEBUG
    name = os.getenv("HAPPY_HOUR_LOG_LEVEL", "").strip().upper()
    level = logging.getLevelName(name) if name else logging.INFO
    # getLevelName returns "Level X" for unknown names
    return level if isinstance(level, int) else logging.INFO


def setup_logger(
    name: str = "happy_hour",
    level: Optional[int] = None,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """(Re)configure the pipeline logger with a single stream handler."""
    if level is None:
        level = level_from_env()

    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATEFMT))
    logger.addHandler(handler)

    logger.setLevel(level)
    logger.propagate = False
    return logger


LOGGER: logging.Logger = setup_logger()

__all__ = ["LOGGER", "level_from_env", "setup_logger"]
