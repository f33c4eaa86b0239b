"""
Logging setup for the salesforce_tools package.

Everything logs under the ``salesforce_tools`` logger to stderr; stdout carries
the MCP STDIO transport and must stay free of log lines.
"""

from __future__ import annotations

import logging
import os
import sys

PACKAGE_LOGGER = "salesforce_tools"
LEVEL_ENV = "SALESFORCE_TOOLS_LOG_LEVEL"
FORMAT_ENV = "SALESFORCE_TOOLS_LOG_FORMAT"
DEFAULT_FORMAT = "%(asctime)s %(levelname)s [salesforce] %(name)s: %(message)s"

_MARKER = "_salesforce_tools_handler"


def parse_level(value: str | int | None, default: int = logging.INFO) -> int:
    """Turn "debug", "10" or logging.DEBUG into a level number; unknown names give ``default``."""
    if value is None or value == "":
        return default
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if text.isdigit():
        return int(text)
    level = logging.getLevelName(text.upper())
    return level if isinstance(level, int) else default


def configure_logging(level: str | int | None = None, fmt: str | None = None) -> logging.Logger:
    """
    Attach the stderr handler to the package logger, once.

    Later calls leave an installed handler alone and return the same logger.
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    if any(getattr(h, _MARKER, False) for h in package_logger.handlers):
        return package_logger

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(fmt or os.getenv(FORMAT_ENV) or DEFAULT_FORMAT))
    setattr(handler, _MARKER, True)

    package_logger.setLevel(parse_level(level if level is not None else os.getenv(LEVEL_ENV)))
    package_logger.addHandler(handler)
    package_logger.propagate = False
    return package_logger


def get_logger(name: str | None = None) -> logging.Logger:
    """Logger for a module of this package, with the stderr handler in place."""
    configure_logging()
    return logging.getLogger(name or PACKAGE_LOGGER)
