"""
Utilities module for panbin.

- Logging configuration for the CLI
"""

from .logging_setup import configure_logging, LOG_FORMAT

__all__ = [
    "configure_logging",
    "LOG_FORMAT",
]
