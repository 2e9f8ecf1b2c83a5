"""
Utilities module for PR-Pilot.
"""

from .logger import setup_logging, get_logger, ReviewLogger
from .exceptions import (
    ReviewBotError,
    ConfigurationError,
    DiffParsingError,
    MalformedHunkHeaderError
)

__all__ = [
    "setup_logging",
    "get_logger",
    "ReviewLogger",
    "ReviewBotError",
    "ConfigurationError",
    "DiffParsingError",
    "MalformedHunkHeaderError"
]
