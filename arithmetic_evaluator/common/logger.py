"""Package-wide logger."""
import logging
import sys
from typing import Optional, Union

LOGGER_NAME: str = "arithmetic_evaluator"
LOG_FORMAT: str = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

logger: logging.Logger = logging.getLogger(LOGGER_NAME)

_handler: Optional[logging.Handler] = None


def configure_logging(level: Union[int, str] = logging.INFO) -> None:
    """
    Attach a single stderr handler to the package logger.

    Calling it again only updates the level, so front ends may call it freely.

    :param level: Logging level name or number
    """
    global _handler

    if isinstance(level, str):
        level = level.upper()
    logger.setLevel(level)

    if _handler is None:
        _handler = logging.StreamHandler(sys.stderr)
        _handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(_handler)
