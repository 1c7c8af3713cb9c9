"""
panbin v0.1.0

Logging configuration shared by the command-line entry points.

Record output goes to stdout or the output file; log messages always go to
stderr (and optionally a log file) so they never mix with records.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def configure_logging(level: Union[str, int] = 'WARNING',
                      log_file: Optional[Union[str, Path]] = None) -> logging.Logger:
    """
    Configure the root logger.

    Args:
        level: Level name ('DEBUG', 'INFO', ...) or logging constant
        log_file: Optional file receiving the same messages

    Returns:
        The 'panbin' package logger
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.WARNING)

    handlers = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers, force=True)
    return logging.getLogger('panbin')
