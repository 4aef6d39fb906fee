"""Logging configuration for rumikube."""

import logging
import sys

PACKAGE_PREFIX = "rumikube."

FORMATS = {
    "simple": "%(name)s - %(levelname)s - %(message)s",
    "detailed": "%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s",
}


def setup_logging(level: str = "WARNING", format_style: str = "simple") -> None:
    """
    Set up logging for the command line and GUI front ends.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_style: "simple" or "detailed"
    """
    numeric_level = getattr(logging, level.upper(), logging.WARNING)
    log_format = FORMATS.get(format_style, FORMATS["simple"])
    logging.basicConfig(
        level=numeric_level,
        format=log_format,
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def get_game_logger(module_name: str) -> logging.Logger:
    """
    Get a logger with the package prefix stripped.

    Args:
        module_name: Full module name (e.g., 'rumikube.engine')

    Returns:
        Logger named after the module (e.g., 'engine')
    """
    if module_name.startswith(PACKAGE_PREFIX):
        return logging.getLogger(module_name[len(PACKAGE_PREFIX):])
    return logging.getLogger(module_name)
