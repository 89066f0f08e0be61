"""Logging configuration for the costbook package.

Library modules only call ``logging.getLogger(__name__)``; the CLI calls
``configure_logging`` once at startup.
"""

import logging
import os

from rich.console import Console
from rich.logging import RichHandler

PKG_LOGGER_NAME = "costbook"


def _parse_level(level: int | str | None) -> int:
    if isinstance(level, int):
        return level
    if level is None:
        level = os.environ.get("COSTBOOK_LOG_LEVEL", "WARNING")
    level = level.strip().upper()
    if level.isdigit():
        return int(level)
    numeric = getattr(logging, level, None)
    return numeric if isinstance(numeric, int) else logging.WARNING


def configure_logging(level: int | str | None = None) -> logging.Logger:
    """Attach a single rich handler to the package logger.

    Args:
        level: Level as int or name. If None, uses COSTBOOK_LOG_LEVEL or WARNING.

    Returns:
        The package logger.
    """
    logger = logging.getLogger(PKG_LOGGER_NAME)
    logger.setLevel(_parse_level(level))

    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(console=Console(stderr=True), show_path=False)
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
        logger.addHandler(handler)
        logger.propagate = False

    return logger
