"""Diagnostic logging for bsh."""

import logging
import os

from rich.console import Console
from rich.logging import RichHandler

logger = logging.getLogger("bsh")


def setup_logging(verbose: bool = False) -> None:
    """Attach a rich handler on stderr. $BSH_LOG_LEVEL overrides the level."""
    level = os.environ.get("BSH_LOG_LEVEL", "DEBUG" if verbose else "WARNING").upper()

    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, level, logging.WARNING))
    logger.propagate = False
