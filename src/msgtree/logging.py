"""Logging utilities."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

_LOG_FORMAT = "%(name)s: %(message)s"


def configure_logging(level: str = "WARNING") -> None:
    """Configure application logging.

    Diagnostics go to stderr so they never interleave with a rendered tree on
    stdout.

    Args:
        level: Logging level name.
    """

    root = logging.getLogger()
    root.setLevel(level.upper())

    formatter = logging.Formatter(fmt=_LOG_FORMAT)

    # Avoid duplicate handlers if configure_logging is called multiple times
    existing = [h for h in root.handlers if isinstance(h, RichHandler)]
    if existing:
        for h in existing:
            h.setFormatter(formatter)
        return

    handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        show_time=False,
        show_path=False,
    )
    handler.setFormatter(formatter)
    root.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """Get a module logger."""

    return logging.getLogger(name)
