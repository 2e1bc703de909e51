from __future__ import annotations

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler


LOGGER_NAME = "tagfmt"


def setup_logger(level: str = "INFO", console: Optional[Console] = None) -> logging.Logger:
    """Send every ``tagfmt.*`` logger to one rich handler, on stderr by default.

    Only the package logger is configured, never the root logger, and calling
    this again replaces the handler instead of adding a second one.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    console = console or Console(stderr=True, highlight=False)
    handler = RichHandler(console=console, show_time=False, show_path=False, rich_tracebacks=True, markup=False)
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger = logging.getLogger(LOGGER_NAME)
    for old in list(logger.handlers):
        logger.removeHandler(old)
    logger.addHandler(handler)
    logger.setLevel(numeric_level)
    logger.propagate = False
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    if name and not name.startswith(LOGGER_NAME):
        name = f"{LOGGER_NAME}.{name}"
    return logging.getLogger(name or LOGGER_NAME)
