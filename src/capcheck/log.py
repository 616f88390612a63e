"""Logging setup for the command line."""

import logging

from rich.console import Console
from rich.logging import RichHandler

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def setup_logging(level: str = "WARNING") -> logging.Logger:
    """Route capcheck logs through a stderr RichHandler."""
    logger = logging.getLogger("capcheck")
    logger.setLevel(level.upper())
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(rich_tracebacks=True, console=Console(stderr=True), show_path=False)
        logger.addHandler(handler)
    return logger
