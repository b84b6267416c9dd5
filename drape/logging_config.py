"""
Logging setup for scripts and examples.

The library itself only creates module loggers under ``drape``; it never
installs handlers.  Call :func:`setup_logging` once from an entry point.
"""
import logging
import sys
from typing import List, Optional

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
DATE_FORMAT = "%H:%M:%S"


def _reset(logger: logging.Logger) -> None:
    # close before detaching so file handles are released
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    Route the ``drape`` logger to stdout and, optionally, a file.

    Calling it again replaces the handlers from the previous call.

    Args:
        level: Logging level for the logger and every handler.
        log_file: Optional path; the file is overwritten.

    Returns:
        The configured ``drape`` logger.
    """
    logger = logging.getLogger("drape")
    _reset(logger)
    logger.setLevel(level)

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode="w", encoding="utf-8"))

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.debug("Logging initialized at %s", logging.getLevelName(level))
    return logger
