"""Logging setup shared by all simulator components."""

import logging
import sys
from typing import Union

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_root_level = logging.INFO


def set_global_level(level: Union[str, int]) -> None:
    """Set the level used by loggers created afterwards and by existing ones.

    Args:
        level: Logging level name or number
    """
    global _root_level
    _root_level = logging.getLevelName(level) if isinstance(level, str) else level
    for logger in logging.Logger.manager.loggerDict.values():
        if isinstance(logger, logging.Logger) and logger.name.startswith("canalsim."):
            logger.setLevel(_root_level)


def setup_logger(name: str, level: Union[str, int, None] = None) -> logging.Logger:
    """Create (or fetch) a named logger with a single stream handler.

    Args:
        name: Logger name, usually the component class name
        level: Optional level for this logger only

    Returns:
        Configured logger
    """
    logger = logging.getLogger(f"canalsim.{name}")

    logger.setLevel(_root_level if level is None else level)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False

    return logger
