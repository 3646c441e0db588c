"""Logging configuration helpers."""

import logging

from rich.console import Console
from rich.logging import RichHandler


def configure_logging(level: str = "WARNING") -> None:
    """Configure the carbcycle logger with a single rich handler on stderr."""
    logger = logging.getLogger("carbcycle")
    logger.setLevel(getattr(logging, level.upper(), logging.WARNING))
    if logger.handlers:
        return
    handler = RichHandler(console=Console(stderr=True), show_path=False)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
