"""Logging helpers for tesouraria.

Modules call ``get_logger(__name__)``. The CLI calls ``configure_logging``
once at startup; records are rendered through rich so they sit alongside
the console output of the commands.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

_configured = False


def configure_logging(verbose: bool = False) -> None:
    """Configure the package logger once.

    Args:
        verbose: Emit DEBUG records (otherwise WARNING and above).
    """
    global _configured

    level = logging.DEBUG if verbose else logging.WARNING
    logger = logging.getLogger("tesouraria")
    logger.setLevel(level)

    if _configured:
        return

    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
        log_time_format="[%H:%M:%S]",
    )
    handler.setFormatter(logging.Formatter("%(name)s - %(message)s"))
    logger.addHandler(handler)
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Return a module logger under the package namespace."""
    return logging.getLogger(name)
