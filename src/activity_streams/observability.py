"""Logging setup."""

from __future__ import annotations

import logging

from rich.logging import RichHandler

_LOGGING_CONFIGURED = False


def configure_logging(level: int | str = logging.INFO) -> None:
    """Configure Rich-backed logging once for the process."""
    global _LOGGING_CONFIGURED  # noqa: PLW0603
    if _LOGGING_CONFIGURED:
        return
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(show_path=False, rich_tracebacks=True)],
    )
    _LOGGING_CONFIGURED = True
