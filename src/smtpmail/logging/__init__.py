"""Logging setup for smtpmail.

Library modules log through ``logging.getLogger(__name__)``; applications
call :func:`init_logging` once at startup to attach a console handler.

Examples:
    >>> from smtpmail.logging import init_logging, get_logger
    >>> logger = init_logging(preset="dev")  # doctest: +SKIP
    >>> get_logger("mail.dispatcher").name
    'smtpmail.mail.dispatcher'
"""

from __future__ import annotations

import logging

from rich.console import Console

from smtpmail.logging.manager import (
    FALLBACK_PRESETS,
    LOGGING_LEVEL,
    ROOT_LOGGER_NAME,
    TRACE_LEVEL,
    build_handler,
    resolve_level,
)

_root_logger: logging.Logger | None = None


def init_logging(
    level: int | str | None = None,
    *,
    preset: str | None = None,
    console: Console | None = None,
    rich_tracebacks: bool = False,
) -> logging.Logger:
    """Configure the ``smtpmail`` logger with a rich console handler.

    Calling it again replaces the handler installed by the previous call.

    Args:
        level: Handler level (name or number). Takes precedence over *preset*.
        preset: One of :data:`FALLBACK_PRESETS` (``trace``, ``dev``,
            ``default``, ``quiet``).
        console: Rich console to write to (stderr by default).
        rich_tracebacks: Render exceptions with rich tracebacks.

    Returns:
        The configured ``smtpmail`` logger.

    Raises:
        ValueError: If the level or preset is unknown.
    """
    global _root_logger  # pylint: disable=global-statement

    if level is None:
        preset_name = preset or "default"
        if preset_name not in FALLBACK_PRESETS:
            raise ValueError(f"Unknown logging preset: {preset_name!r}")
        level = FALLBACK_PRESETS[preset_name]
    resolved = resolve_level(level)

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for existing in list(logger.handlers):
        if getattr(existing, "_smtpmail_managed", False):
            logger.removeHandler(existing)

    handler = build_handler(resolved, console=console, rich_tracebacks=rich_tracebacks)
    handler._smtpmail_managed = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.setLevel(resolved)

    _root_logger = logger
    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger under the ``smtpmail`` namespace.

    Args:
        name: Dotted suffix (``"mail.builder"``) or a full ``smtpmail.*`` name.
            ``None`` returns the package root logger.
    """
    if not name:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


__all__ = [
    "FALLBACK_PRESETS",
    "LOGGING_LEVEL",
    "TRACE_LEVEL",
    "get_logger",
    "init_logging",
]
