"""Logging setup for the command line."""

import logging
import sys

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
HANDLER_NAME = "ledgerlink"


def configure_logging(level: str = "WARNING") -> logging.Logger:
    """Send log records at or above a level to stderr.

    Calling it again replaces the handler installed by the previous call and
    leaves other handlers alone.

    Args:
        level: Level name, case-insensitive. Unknown names mean WARNING.

    Returns:
        Configured root logger
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.WARNING))

    for handler in root_logger.handlers[:]:
        if handler.get_name() == HANDLER_NAME:
            root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.addHandler(handler)
    return root_logger
