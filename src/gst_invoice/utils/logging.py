"""
Logging for the GST invoice tools.

Every module logs through a child of the ``gst_invoice`` logger; the CLI
calls :func:`setup_logging` once to attach the output handlers.
"""

import logging
import sys
from pathlib import Path
from typing import List, Optional

PACKAGE_LOGGER = "gst_invoice"
DEFAULT_FORMAT = "%(asctime)s %(levelname)-8s %(name)s:%(lineno)d %(message)s"


def _level_from_name(name: Optional[str]) -> int:
    level = logging.getLevelName((name or "INFO").upper())
    # getLevelName returns a "Level X" string for names it does not know
    return level if isinstance(level, int) else logging.INFO


def _build_handlers(log_file: Optional[str]) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(path, encoding="utf-8"))
    return handlers


def setup_logging(
    level: Optional[str] = None,
    log_file: Optional[str] = None,
    format_string: Optional[str] = None,
) -> logging.Logger:
    """
    Attach stdout (and optionally file) output to the package logger.

    Calling it again replaces the handlers from the previous call.

    Args:
        level: Level name such as DEBUG or ERROR; unknown names mean INFO
        log_file: Also write records to this file, creating its directory
        format_string: Record format, defaults to ``DEFAULT_FORMAT``

    Returns:
        The ``gst_invoice`` logger
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(_level_from_name(level))

    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()

    formatter = logging.Formatter(format_string or DEFAULT_FORMAT)
    for handler in _build_handlers(log_file):
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Logger under ``gst_invoice``; ``__name__`` of package modules is used as-is."""
    if name == PACKAGE_LOGGER or name.startswith(PACKAGE_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{PACKAGE_LOGGER}.{name}")
