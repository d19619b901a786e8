"""Logging setup for the command line."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

_LEVELS = [logging.WARNING, logging.INFO, logging.DEBUG]


def configure_logging(verbose: int = 0) -> None:
    """Route ramsync logs to stderr through Rich.

    Each ``-v`` lowers the threshold one step, from WARNING to DEBUG.
    """
    level = _LEVELS[min(verbose, len(_LEVELS) - 1)]
    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger = logging.getLogger("ramsync")
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
