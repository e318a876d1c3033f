"""Log levels and handler setup for smtpmail.

Adds a ``TRACE`` level below ``DEBUG`` for wire-level SMTP detail and wires
the ``smtpmail`` logger to a :class:`rich.logging.RichHandler`.
"""

from __future__ import annotations

import logging
from types import SimpleNamespace
from typing import Any

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER_NAME = "smtpmail"

TRACE_LEVEL = 5

LOGGING_LEVEL = SimpleNamespace(
    TRACE=TRACE_LEVEL,
    DEBUG=logging.DEBUG,
    INFO=logging.INFO,
    WARNING=logging.WARNING,
    ERROR=logging.ERROR,
    CRITICAL=logging.CRITICAL,
)

# Preset name -> handler level
FALLBACK_PRESETS: dict[str, str] = {
    "trace": "TRACE",
    "dev": "DEBUG",
    "default": "INFO",
    "quiet": "WARNING",
}

logging.addLevelName(TRACE_LEVEL, "TRACE")


def resolve_level(level: int | str) -> int:
    """Convert a level name (``"trace"``, ``"INFO"``...) or number to an int.

    Raises:
        ValueError: If the name is unknown.
    """
    if isinstance(level, int):
        return level
    value = getattr(LOGGING_LEVEL, level.strip().upper(), None)
    if value is None:
        raise ValueError(f"Unknown log level: {level!r}")
    return int(value)


def build_handler(level: int, *, console: Console | None = None, **options: Any) -> RichHandler:
    """Create the rich console handler used by :func:`smtpmail.logging.init_logging`."""
    handler = RichHandler(
        level=level,
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=options.get("rich_tracebacks", False),
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    return handler


__all__ = [
    "FALLBACK_PRESETS",
    "LOGGING_LEVEL",
    "ROOT_LOGGER_NAME",
    "TRACE_LEVEL",
    "build_handler",
    "resolve_level",
]
