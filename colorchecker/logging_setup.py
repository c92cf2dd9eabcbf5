"""
Logging setup for the color checker tools.

Maps the command line verbosity names onto standard logging levels and
installs a single console handler on the package logger.
"""

import logging
from typing import Optional

from .config import PipelineConfig

TRACE = 5
logging.addLevelName(TRACE, 'TRACE')

VERBOSE_LEVELS = {
    'fatal': logging.CRITICAL,
    'error': logging.ERROR,
    'warning': logging.WARNING,
    'info': logging.INFO,
    'debug': logging.DEBUG,
    'trace': TRACE,
}

PACKAGE_LOGGER = 'colorchecker'


def verbose_level(name: str) -> int:
    """Return the logging level for a verbosity name (case-insensitive)."""
    try:
        return VERBOSE_LEVELS[name.lower()]
    except KeyError:
        raise ValueError(
            f"invalid verbose level '{name}', expected one of: {', '.join(VERBOSE_LEVELS)}"
        ) from None


def setup_logging(level_name: Optional[str] = None,
                  stream=None) -> logging.Logger:
    """
    Configure the package logger.

    Args:
        level_name: One of fatal, error, warning, info, debug, trace
        stream: Output stream for the console handler (stderr if None)

    Returns:
        The configured package logger
    """
    level = verbose_level(level_name or PipelineConfig.LOGGING['DEFAULT_LEVEL'])

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    # Remove existing handlers to avoid duplicates on repeated calls
    logger.handlers.clear()

    handler = logging.StreamHandler(stream)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(PipelineConfig.LOGGING['FORMAT']))
    logger.addHandler(handler)

    return logger
