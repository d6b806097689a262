"""
Logging configuration for curse-parser.

The package only creates loggers; nothing is printed until an application
(such as run_parser.py) calls setup_logger(). Library objects never change
logging levels on their own.
"""

import logging
import sys
from typing import Optional, TextIO, Union

PACKAGE_LOGGER = "curse_parser"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Marks handlers installed by setup_logger, so repeated calls replace them
_HANDLER_FLAG = "_curse_parser_handler"


def _resolve_level(level: Union[int, str]) -> int:
    """Accept 10 / "DEBUG" / "debug"; unknown names fall back to INFO."""
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def _make_handler(handler: logging.Handler, level: int) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    setattr(handler, _HANDLER_FLAG, True)
    return handler


def setup_logger(
    name: str = PACKAGE_LOGGER,
    level: Union[int, str] = logging.INFO,
    log_file: Optional[str] = None,
    stream: Optional[TextIO] = None
) -> logging.Logger:
    """
    Send a logger's records to a console stream and, optionally, a file.

    Safe to call more than once: handlers from an earlier call are closed and
    replaced, so the level and log file always reflect the latest call.

    Args:
        name: Logger name
        level: Logging level, as a number or a name such as "DEBUG"
        log_file: Optional file path for logging
        stream: Console stream, stdout by default

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    level = _resolve_level(level)

    for handler in [h for h in logger.handlers if getattr(h, _HANDLER_FLAG, False)]:
        logger.removeHandler(handler)
        handler.close()

    logger.setLevel(level)
    logger.addHandler(_make_handler(logging.StreamHandler(stream or sys.stdout), level))
    if log_file:
        logger.addHandler(_make_handler(logging.FileHandler(log_file), level))

    return logger


# Library default: silent unless the application configures logging
logging.getLogger(PACKAGE_LOGGER).addHandler(logging.NullHandler())


def get_module_logger(module_name: str) -> logging.Logger:
    """
    Get a child logger for a specific module.

    Child loggers (e.g. "curse_parser.accessor") propagate to the package
    logger, so their name shows which component produced each message.

    Args:
        module_name: Name of the module (e.g., 'accessor', 'pagination')

    Returns:
        Child logger instance
    """
    return logging.getLogger(f"{PACKAGE_LOGGER}.{module_name}")
