"""Logging setup for the study_royale package."""

import logging

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "study_royale"


def configure_logging(level: str = "INFO", console: Console | None = None) -> logging.Logger:
    """
    Attach a Rich handler to the package logger.

    Calling this more than once only updates the level.

    Args:
        level: Log level name (DEBUG, INFO, ...)
        console: Console to render to, stderr when omitted

    Returns:
        The configured package logger
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level.upper())

    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(
            console=console or Console(stderr=True),
            show_path=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
        logger.addHandler(handler)
        logger.propagate = False

    return logger
