"""
Utility functions for Salesforce Tools.
"""

from .logging import configure_logging, get_logger, parse_level

__all__ = [
    "configure_logging",
    "get_logger",
    "parse_level",
]
