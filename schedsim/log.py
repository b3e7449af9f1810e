from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "schedsim"


def configure_logging(level: str = "WARNING") -> logging.Logger:
    """
    Attach a Rich handler (stderr) to the package logger. Safe to call more
    than once; the level is updated and no duplicate handler is added.
    """
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        numeric = logging.WARNING

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(numeric)
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(console=Console(stderr=True), show_path=False, markup=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
    return logger
