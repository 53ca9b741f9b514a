"""Logging setup for the finflex command line."""

import logging

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(verbose: bool = False) -> None:
    """Route log records to stderr through rich.

    Args:
        verbose: Log DEBUG and up when True, otherwise WARNING and up.
    """
    logger = logging.getLogger("finflex")
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)

    logger.handlers.clear()

    handler = RichHandler(console=Console(stderr=True), show_path=verbose, rich_tracebacks=True)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
